import os
import sys

import pytest


def pytest_configure():
    # Ensure the project root is importable for `Shared.*`, `Sale.*` and `Blockchain.*` imports
    root = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))
    if root not in sys.path:
        sys.path.insert(0, root)


@pytest.fixture(scope="session")
def artifacts_dir(tmp_path_factory):
    import requests
    from solcx.exceptions import DownloadError, SolcInstallationError

    from Blockchain.compile_contracts import compile_contracts, ensure_solc
    from Shared.config import CONTRACTS_DIR, get_solc_version

    version = get_solc_version()
    # solc is downloaded on first use; compile errors must still fail the tests
    try:
        ensure_solc(version)
    except (DownloadError, SolcInstallationError, requests.RequestException, OSError) as e:
        pytest.skip(f"solc {version} is not available: {e}")

    output_dir = tmp_path_factory.mktemp("json_contracts")
    compile_contracts(CONTRACTS_DIR, str(output_dir), version)
    return str(output_dir)


@pytest.fixture
def web3():
    pytest.importorskip("eth_tester")
    from web3 import EthereumTesterProvider, Web3

    return Web3(EthereumTesterProvider())


@pytest.fixture
def addresses_path(tmp_path):
    return str(tmp_path / "contract_addresses.json")


@pytest.fixture
def sale_parameters():
    from web3 import Web3

    return {
        "initial_supply": Web3.to_wei(1_000_000, "ether"),
        "token_price": Web3.to_wei("0.01", "ether"),
        "sale_allocation": Web3.to_wei(750_000, "ether"),
    }


@pytest.fixture
def deployed(web3, artifacts_dir, addresses_path, sale_parameters):
    from Blockchain.deploy_contracts import deploy_contracts

    token, token_sale = deploy_contracts(
        web3,
        web3.eth.accounts[0],
        sale_parameters["initial_supply"],
        sale_parameters["token_price"],
        sale_parameters["sale_allocation"],
        artifacts_dir=artifacts_dir,
        addresses_path=addresses_path,
    )
    return token, token_sale
