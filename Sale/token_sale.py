import logging

from web3.logs import DISCARD

from Shared.web3_utils import build_tx_params, send_transaction, from_token_units

logging.basicConfig(level=logging.INFO)


# .call() is used for functions that do not modify the state of the blockchain
def get_token_price(token_sale):
    return token_sale.functions.tokenPrice().call()


def get_tokens_sold(token_sale):
    return token_sale.functions.tokensSold().call()


def get_admin(token_sale):
    return token_sale.functions.admin().call()


def get_token_balance(token, address):
    return token.functions.balanceOf(address).call()


# Move part of the owner's supply to the sale contract so it has tokens to sell
def fund_sale(web3, token, token_sale, owner, amount, gas=None):
    receipt = send_transaction(
        web3,
        token.functions.transfer(token_sale.address, amount),
        build_tx_params(owner, gas=gas),
        name="Sale funding",
    )
    logging.info(f"Transferred {from_token_units(amount)} MTK to the sale contract {token_sale.address}.")
    return receipt


# buyTokens() from TokenSale.sol: the value sent must be exactly price * number of tokens,
# otherwise the contract reverts with "Incorrect Ether value sent"
def buy_tokens(web3, token_sale, buyer, number_of_tokens, value=None, gas=None):
    if value is None:
        value = get_token_price(token_sale) * number_of_tokens

    receipt = send_transaction(
        web3,
        token_sale.functions.buyTokens(number_of_tokens),
        build_tx_params(buyer, value=value, gas=gas),
        name=f"Purchase of {number_of_tokens} tokens",
    )
    logging.info(f"{buyer} bought {number_of_tokens} tokens for {value} wei.")
    return receipt


# Decode the Sell events of a receipt, ignoring the token's Transfer logs
def get_sell_events(token_sale, receipt):
    return token_sale.events.Sell().process_receipt(receipt, errors=DISCARD)


# endSale() sends the remaining tokens and the collected ether to the admin
def end_sale(web3, token_sale, admin, gas=None):
    receipt = send_transaction(
        web3,
        token_sale.functions.endSale(),
        build_tx_params(admin, gas=gas),
        name="End of sale",
    )
    logging.info(f"Sale {token_sale.address} ended by {admin}.")
    return receipt
