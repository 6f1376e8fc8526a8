import os
import json
from decimal import Decimal

from dotenv import load_dotenv
from web3 import Web3

# Credentials for remote networks live in a .env file at the project root
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
load_dotenv(os.path.join(PROJECT_ROOT, '.env'))

NETWORKS_PATH = os.path.join(PROJECT_ROOT, 'Blockchain', 'networks.json')
CONFIG_PATH = os.path.join(PROJECT_ROOT, 'Blockchain', 'contract_addresses.json')
ARTIFACTS_DIR = os.path.join(PROJECT_ROOT, 'Blockchain', 'json_contracts')
CONTRACTS_DIR = os.path.join(PROJECT_ROOT, 'Blockchain', 'contracts')

DEFAULT_NETWORK = 'development'


def get_active_network():
    return os.getenv('NETWORK', DEFAULT_NETWORK)


def load_networks(path=NETWORKS_PATH):
    with open(path, 'r') as f:
        return json.load(f)


def get_network_config(name, path=NETWORKS_PATH):
    networks = load_networks(path).get('networks', {})
    if name not in networks:
        raise ValueError(f"Network '{name}' is not defined in {path}.")
    return networks[name]


# Local profiles are reached through host/port, remote ones through a URL
# template that needs the Infura key
def get_provider_url(network):
    if 'provider_url' in network:
        infura_key = os.getenv('INFURA_KEY')
        if not infura_key or infura_key.startswith('YOUR_'):
            raise ValueError("INFURA_KEY is not set. Add it to the .env file.")
        return network['provider_url'].format(infura_key=infura_key)
    return f"http://{network['host']}:{network['port']}"


def get_mnemonic():
    mnemonic = os.getenv('MNEMONIC')
    if not mnemonic or mnemonic.startswith('YOUR_'):
        raise ValueError("MNEMONIC is not set. Add it to the .env file.")
    return mnemonic


def get_solc_version(path=NETWORKS_PATH):
    return load_networks(path)['compilers']['solc']['version']


# Amounts in networks.json are written in whole tokens / ether and converted
# here to base units / wei
def get_sale_parameters(path=NETWORKS_PATH):
    params = load_networks(path)['token_sale']
    return {
        'initial_supply': Web3.to_wei(Decimal(params['initial_supply']), 'ether'),
        'token_price': Web3.to_wei(Decimal(params['token_price']), 'ether'),
        'sale_allocation': Web3.to_wei(Decimal(params['sale_allocation']), 'ether'),
    }


def load_contract_addresses(path=CONFIG_PATH):
    if not os.path.exists(path):
        return {}
    with open(path, 'r') as f:
        return json.load(f)


def is_configured_address(address):
    return bool(address) and Web3.is_address(address)


def load_contract_address(contract_name, path=CONFIG_PATH):
    # Load the contract address from the configuration file
    address = load_contract_addresses(path).get(contract_name)
    if not is_configured_address(address):
        raise ValueError(f"{contract_name} address not found in configuration ({address}).")
    return Web3.to_checksum_address(address)


def save_contract_addresses(addresses, path=CONFIG_PATH):
    contract_addresses = load_contract_addresses(path)
    contract_addresses.update(addresses)

    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'w') as f:
        json.dump(contract_addresses, f, indent=4)
