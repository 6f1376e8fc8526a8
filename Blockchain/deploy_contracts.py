# Deployment of MyToken and TokenSale, wiring the sale to the token
# Run from the project root: python -m Blockchain.deploy_contracts
import sys
import logging

from Shared.config import (
    ARTIFACTS_DIR,
    CONFIG_PATH,
    get_active_network,
    get_network_config,
    get_sale_parameters,
    save_contract_addresses,
)
from Shared.web3_utils import (
    build_tx_params,
    get_accounts,
    get_contract,
    get_contract_factory,
    load_artifact,
    save_artifact,
    setup_web3,
)
from Sale.token_sale import fund_sale

logging.basicConfig(level=logging.INFO)


def deploy_contract(web3, artifact, deployer, constructor_args, gas=None):
    factory = get_contract_factory(web3, artifact)
    name = artifact['contractName']

    try:
        tx_hash = factory.constructor(*constructor_args).transact(build_tx_params(deployer, gas=gas))
        receipt = web3.eth.wait_for_transaction_receipt(tx_hash)
    except Exception as e:
        logging.error(f"Failed to deploy {name}: {e}")
        raise

    if receipt['status'] == 0 or not receipt['contractAddress']:
        raise RuntimeError(f"Deployment of {name} reverted. Hash: {web3.to_hex(tx_hash)}")

    logging.info(f"{name} deployed at {receipt['contractAddress']}.")
    return get_contract(web3, receipt['contractAddress'], artifact['abi']), receipt


# Same record Truffle keeps in build/contracts/<Name>.json after a migration
def record_deployment(web3, artifact, receipt, artifacts_dir=ARTIFACTS_DIR):
    artifact.setdefault('networks', {})[str(web3.eth.chain_id)] = {
        'address': receipt['contractAddress'],
        'transactionHash': web3.to_hex(receipt['transactionHash']),
        'blockNumber': receipt['blockNumber'],
    }
    save_artifact(artifact, artifacts_dir)


def deploy_contracts(web3, deployer, initial_supply, token_price, sale_allocation=0,
                     artifacts_dir=ARTIFACTS_DIR, addresses_path=CONFIG_PATH, gas=None):
    token_artifact = load_artifact("MyToken", artifacts_dir)
    sale_artifact = load_artifact("TokenSale", artifacts_dir)

    token, token_receipt = deploy_contract(web3, token_artifact, deployer, [initial_supply], gas)
    # The sale contract is built on top of the token address of the first deployment
    token_sale, sale_receipt = deploy_contract(web3, sale_artifact, deployer, [token.address, token_price], gas)

    if sale_allocation:
        fund_sale(web3, token, token_sale, deployer, sale_allocation, gas=gas)

    save_contract_addresses({"MyToken": token.address, "TokenSale": token_sale.address}, addresses_path)
    record_deployment(web3, token_artifact, token_receipt, artifacts_dir)
    record_deployment(web3, sale_artifact, sale_receipt, artifacts_dir)

    return token, token_sale


def main():
    network_name = get_active_network()
    try:
        network = get_network_config(network_name)
        web3 = setup_web3(network_name)
        deployer = get_accounts(web3)[0]
        params = get_sale_parameters()

        token, token_sale = deploy_contracts(
            web3,
            deployer,
            params['initial_supply'],
            params['token_price'],
            params['sale_allocation'],
            gas=network.get('gas'),
        )
    except Exception as e:
        logging.error(f"Deployment failed: {e}")
        sys.exit(1)

    print(f"MyToken: {token.address}")
    print(f"TokenSale: {token_sale.address}")


if __name__ == "__main__":
    main()
