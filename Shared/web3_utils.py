import os
import json
import logging
from decimal import Decimal

from eth_account import Account
from web3 import Web3
from web3.middleware import SignAndSendRawMiddlewareBuilder

from Shared.config import (
    ARTIFACTS_DIR,
    CONFIG_PATH,
    get_mnemonic,
    get_network_config,
    get_provider_url,
    load_contract_addresses,
    is_configured_address,
)

logging.basicConfig(level=logging.INFO)

TOKEN_DECIMALS = 18


def setup_web3(network_name):
    network = get_network_config(network_name)

    # Create web3 instance that tries to connect to the node of the selected network
    web3 = Web3(Web3.HTTPProvider(get_provider_url(network)))
    if not web3.is_connected():
        logging.error(f"Failed to connect to the blockchain ({network_name}).")
        raise ConnectionError(f"Failed to connect to the blockchain ({network_name}).")

    # Remote nodes hold no unlocked accounts: sign locally with the key derived from the mnemonic
    if network.get('requires_credentials'):
        Account.enable_unaudited_hdwallet_features()
        account = Account.from_mnemonic(get_mnemonic())
        web3.middleware_onion.inject(SignAndSendRawMiddlewareBuilder.build(account), layer=0)
        web3.eth.default_account = account.address
        logging.info(f"Using account {account.address} on {network_name}.")

    return web3


def get_accounts(web3):
    if is_configured_address(web3.eth.default_account):
        return [web3.eth.default_account]
    return web3.eth.accounts


# Load a Truffle-style build artifact (ABI, bytecode, deployment records)
def load_artifact(contract_name, artifacts_dir=ARTIFACTS_DIR):
    path = os.path.join(artifacts_dir, f"{contract_name}.json")
    if not os.path.exists(path):
        raise FileNotFoundError(f"Artifact not found: {path}. Compile the contracts first.")

    with open(path, 'r') as f:
        artifact = json.load(f)

    if not artifact.get('abi'):
        raise ValueError(f"ABI not found in artifact {path}")
    if not artifact.get('bytecode'):
        raise ValueError(f"Bytecode not found in artifact {path}")
    return artifact


def save_artifact(artifact, artifacts_dir=ARTIFACTS_DIR):
    os.makedirs(artifacts_dir, exist_ok=True)
    path = os.path.join(artifacts_dir, f"{artifact['contractName']}.json")
    with open(path, 'w') as f:
        json.dump(artifact, f, indent=2)
    return path


# It retrieves the contract instance using the address and ABI
def get_contract(web3, address, abi):
    return web3.eth.contract(address=address, abi=abi)


def get_contract_factory(web3, artifact):
    return web3.eth.contract(abi=artifact['abi'], bytecode=artifact['bytecode'])


# The address comes from contract_addresses.json; if it still holds a placeholder,
# the deployment recorded in the artifact for the current chain is used instead
def get_deployed_contract(web3, contract_name, addresses_path=CONFIG_PATH, artifacts_dir=ARTIFACTS_DIR):
    artifact = load_artifact(contract_name, artifacts_dir)

    address = load_contract_addresses(addresses_path).get(contract_name)
    if not is_configured_address(address):
        deployment = artifact.get('networks', {}).get(str(web3.eth.chain_id), {})
        address = deployment.get('address')
    if not is_configured_address(address):
        raise ValueError(f"{contract_name} is not deployed on chain {web3.eth.chain_id}.")

    return get_contract(web3, Web3.to_checksum_address(address), artifact['abi'])


# Block the contract was deployed in, as recorded in its artifact for this chain;
# 0 when the artifact has no record for this address
def get_deployment_block(web3, contract_name, address, artifacts_dir=ARTIFACTS_DIR):
    try:
        artifact = load_artifact(contract_name, artifacts_dir)
    except FileNotFoundError:
        return 0

    deployment = artifact.get('networks', {}).get(str(web3.eth.chain_id), {})
    if deployment.get('address') != address:
        return 0
    return deployment.get('blockNumber', 0)


# Without an explicit gas limit web3 estimates it, which surfaces reverts before sending
def build_tx_params(sender, value=None, gas=None):
    tx_params = {'from': sender}
    if value is not None:
        tx_params['value'] = value
    if gas is not None:
        tx_params['gas'] = gas
    return tx_params


def send_transaction(web3, fn, tx_params, name="Transaction"):
    try:
        tx_hash = fn.transact(tx_params)
        receipt = web3.eth.wait_for_transaction_receipt(tx_hash)
    except Exception as e:
        logging.error(f"{name} failed: {e}")
        raise

    if receipt['status'] == 0:
        # With an explicit gas limit the revert is only seen in the receipt:
        # replaying the call makes the node report the revert reason
        try:
            fn.call(tx_params, block_identifier=receipt['blockNumber'])
        except Exception as e:
            logging.error(f"{name} reverted: {e}")
            raise
        logging.error(f"{name} reverted: {web3.to_hex(tx_hash)}")
        raise RuntimeError(f"{name} reverted (status 0). Hash: {web3.to_hex(tx_hash)}")

    logging.info(f"{name} mined in block {receipt['blockNumber']}.")
    return receipt


def to_token_units(number_of_tokens, decimals=TOKEN_DECIMALS):
    return int(number_of_tokens) * 10 ** decimals


def from_token_units(amount, decimals=TOKEN_DECIMALS):
    return Decimal(amount) / Decimal(10) ** decimals
