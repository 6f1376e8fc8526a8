import logging

from Shared.config import get_active_network, get_network_config, get_sale_parameters
from Shared.web3_utils import get_accounts, get_deployed_contract, setup_web3, from_token_units
from Blockchain.compile_contracts import compile_contracts
from Blockchain.deploy_contracts import deploy_contracts
from Sale.token_sale import (
    buy_tokens,
    end_sale,
    get_admin,
    get_token_balance,
    get_token_price,
    get_tokens_sold,
)
from Sale.sales_report import op_sales_report, summarize_by_buyer

logging.basicConfig(level=logging.INFO)


def load_sale_contracts(web3):
    token_sale = get_deployed_contract(web3, "TokenSale")
    token = get_deployed_contract(web3, "MyToken")
    return token, token_sale


def select_account(accounts):
    print("Available accounts:")
    for idx, account in enumerate(accounts):
        print(f"[{idx + 1}] {account}")
    account_index = int(input("Select an account by index: ")) - 1
    if account_index < 0 or account_index >= len(accounts):
        print("Invalid index selected.")
        return None
    return accounts[account_index]


def op_deploy(web3, network):
    params = get_sale_parameters()
    deployer = get_accounts(web3)[0]

    compile_contracts()
    token, token_sale = deploy_contracts(
        web3,
        deployer,
        params['initial_supply'],
        params['token_price'],
        params['sale_allocation'],
        gas=network.get('gas'),
    )
    print(f"MyToken deployed at {token.address}")
    print(f"TokenSale deployed at {token_sale.address}")


def CLI_show_balances(web3):
    token, token_sale = load_sale_contracts(web3)

    print(f"\nToken price: {web3.from_wei(get_token_price(token_sale), 'ether')} ETH")
    print(f"Tokens sold: {get_tokens_sold(token_sale)}")
    print(f"Token Sale Contract Balance: {from_token_units(get_token_balance(token, token_sale.address))} MTK")
    for account in get_accounts(web3):
        print(f"{account}: {from_token_units(get_token_balance(token, account))} MTK")


def CLI_buy_tokens(web3, network):
    token, token_sale = load_sale_contracts(web3)

    buyer = select_account(get_accounts(web3))
    if buyer is None:
        return
    try:
        number_of_tokens = int(input("How many tokens do you want to buy? "))
    except ValueError:
        print("Invalid number entered. Operation cancelled.")
        return
    if number_of_tokens <= 0:
        print("The number of tokens must be positive. Operation cancelled.")
        return

    value = get_token_price(token_sale) * number_of_tokens
    print(f"Cost: {web3.from_wei(value, 'ether')} ETH")

    buy_tokens(web3, token_sale, buyer, number_of_tokens, value=value, gas=network.get('gas'))
    print(f"Bought {number_of_tokens} tokens")
    print(f"New Balance: {from_token_units(get_token_balance(token, buyer))} MTK")


def CLI_end_sale(web3, network):
    token, token_sale = load_sale_contracts(web3)
    admin = get_admin(token_sale)

    print(f"\nDo you want to end the sale {token_sale.address}?")
    print("[1] Yes")
    print("[2] No")
    choice = input("Enter your choice (1 or 2): ")
    if choice != "1":
        print("End of sale skipped.")
        return

    end_sale(web3, token_sale, admin, gas=network.get('gas'))
    print(f"Sale ended. Admin balance: {from_token_units(get_token_balance(token, admin))} MTK")


def CLI_sales_report(web3):
    _, token_sale = load_sale_contracts(web3)

    df = op_sales_report(token_sale)
    if df.empty:
        print("No purchases recorded yet.")
        return
    print(f"Purchases per buyer:\n{summarize_by_buyer(df)}")


def main():
    network_name = get_active_network()
    network = get_network_config(network_name)
    web3 = setup_web3(network_name)
    print(f"Connected to {network_name} (chain id {web3.eth.chain_id}).")

    while True:
        print("\nSelect an option:")
        print("[1] Admin")
        print("[2] Buyer")
        print("[3] Sales report")
        print("[0] Exit")
        choice = input("Enter your choice (1, 2, 3 or 0): ")

        try:
            if choice == "1":  # -------------------------------------- ADMIN
                print("\nSelect an option:")
                print("[1] Compile and deploy contracts")
                print("[2] End sale")
                sub_choice = input("Enter your choice (1 or 2): ")

                if sub_choice == "1":  # DEPLOY
                    op_deploy(web3, network)

                elif sub_choice == "2":  # END SALE
                    CLI_end_sale(web3, network)

                else:
                    print("Invalid choice. Returning to main menu.")

            elif choice == "2":  # ------------------------------------- BUYER
                print("\nSelect an option:")
                print("[1] Show balances")
                print("[2] Buy tokens")
                sub_choice = input("Enter your choice (1 or 2): ")

                if sub_choice == "1":  # BALANCES
                    CLI_show_balances(web3)

                elif sub_choice == "2":  # BUY
                    CLI_buy_tokens(web3, network)

                else:
                    print("Invalid choice. Returning to main menu.")

            elif choice == "3":  # ------------------------------------- REPORT
                CLI_sales_report(web3)

            elif choice == "0":  # ------------------------------------- EXIT
                print("Exiting the program.")
                break

            else:
                print("Invalid choice. Please select a valid option.")

        except Exception as e:
            print(f"Operation failed: {e}")


if __name__ == "__main__":
    main()
