import sys
import logging

from Shared.config import get_active_network, get_network_config
from Shared.web3_utils import get_accounts, get_deployed_contract, setup_web3, from_token_units
from Sale.token_sale import buy_tokens, get_token_balance, get_token_price

logging.basicConfig(level=logging.INFO)

TOKENS_TO_BUY = 10  # Number of tokens to buy


def interact(web3, token_sale, token, tokens_to_buy=TOKENS_TO_BUY, gas=None):
    accounts = get_accounts(web3)
    buyer = accounts[0]

    # Check token balance of the sale contract
    balance = get_token_balance(token, token_sale.address)
    print(f"Token Sale Contract Balance: {from_token_units(balance)} MTK")

    # Buy tokens
    token_price = get_token_price(token_sale)
    value = token_price * tokens_to_buy
    buy_tokens(web3, token_sale, buyer, tokens_to_buy, value=value, gas=gas)
    print(f"Bought {tokens_to_buy} tokens")

    # Check new balance
    new_balance = get_token_balance(token, buyer)
    print(f"New Balance: {from_token_units(new_balance)} MTK")
    return new_balance


def main():
    network_name = get_active_network()
    try:
        network = get_network_config(network_name)
        web3 = setup_web3(network_name)
        token_sale = get_deployed_contract(web3, "TokenSale")
        token = get_deployed_contract(web3, "MyToken")
        interact(web3, token_sale, token, gas=network.get('gas'))
    except Exception as e:
        logging.error(e)
        sys.exit(1)


if __name__ == "__main__":
    main()
