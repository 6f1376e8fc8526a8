import pytest
from web3 import Web3

from Shared.web3_utils import to_token_units
from Sale.token_sale import (
    buy_tokens,
    end_sale,
    get_admin,
    get_sell_events,
    get_token_balance,
    get_token_price,
    get_tokens_sold,
)


def test_token_price_matches_deployment(deployed, sale_parameters):
    _, token_sale = deployed
    assert get_token_price(token_sale) == sale_parameters["token_price"]


def test_buy_tokens_credits_buyer_and_emits_sell(web3, deployed):
    token, token_sale = deployed
    buyer = web3.eth.accounts[1]

    receipt = buy_tokens(web3, token_sale, buyer, 10)

    events = get_sell_events(token_sale, receipt)
    assert len(events) == 1
    assert events[0]["event"] == "Sell"
    assert events[0]["args"]["buyer"] == buyer
    assert events[0]["args"]["amount"] == 10

    assert get_token_balance(token, buyer) == to_token_units(10)
    assert get_tokens_sold(token_sale) == 10


def test_buy_tokens_collects_ether(web3, deployed):
    _, token_sale = deployed

    buy_tokens(web3, token_sale, web3.eth.accounts[1], 10)

    assert web3.eth.get_balance(token_sale.address) == Web3.to_wei("0.1", "ether")


def test_buy_tokens_rejects_incorrect_value(web3, deployed):
    token, token_sale = deployed
    buyer = web3.eth.accounts[1]

    with pytest.raises(Exception) as excinfo:
        buy_tokens(web3, token_sale, buyer, 10, value=Web3.to_wei("0.05", "ether"))

    assert "Incorrect Ether value sent" in str(excinfo.value)
    assert get_token_balance(token, buyer) == 0
    assert get_tokens_sold(token_sale) == 0


def test_buy_tokens_rejects_more_than_available(web3, deployed):
    _, token_sale = deployed

    with pytest.raises(Exception) as excinfo:
        buy_tokens(web3, token_sale, web3.eth.accounts[1], 750_001)

    assert "Not enough tokens left for sale" in str(excinfo.value)


def test_end_sale_transfers_remaining_tokens_to_admin(web3, deployed):
    token, token_sale = deployed
    admin = web3.eth.accounts[0]
    buy_tokens(web3, token_sale, web3.eth.accounts[1], 10)

    admin_balance_before = get_token_balance(token, admin)
    remaining = get_token_balance(token, token_sale.address)

    end_sale(web3, token_sale, admin)

    assert get_token_balance(token, admin) == admin_balance_before + remaining
    assert get_token_balance(token, token_sale.address) == 0
    assert web3.eth.get_balance(token_sale.address) == 0


def test_end_sale_only_admin(web3, deployed):
    _, token_sale = deployed
    assert get_admin(token_sale) == web3.eth.accounts[0]

    with pytest.raises(Exception) as excinfo:
        end_sale(web3, token_sale, web3.eth.accounts[1])

    assert "Only admin can end the sale" in str(excinfo.value)


def test_buy_tokens_with_gas_limit_reports_revert_reason(web3, deployed):
    token, token_sale = deployed
    buyer = web3.eth.accounts[1]

    with pytest.raises(Exception) as excinfo:
        buy_tokens(web3, token_sale, buyer, 10, value=Web3.to_wei("0.05", "ether"), gas=5500000)

    assert "Incorrect Ether value sent" in str(excinfo.value)
    assert get_token_balance(token, buyer) == 0
