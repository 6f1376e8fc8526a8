# Script to compile the Solidity sources in Blockchain/contracts into
# Truffle-style JSON artifacts in Blockchain/json_contracts
# Run from the project root: python -m Blockchain.compile_contracts
import os
import logging

import solcx

from Shared.config import ARTIFACTS_DIR, CONTRACTS_DIR, get_solc_version
from Shared.web3_utils import load_artifact, save_artifact

logging.basicConfig(level=logging.INFO)


def ensure_solc(version):
    installed = [str(v) for v in solcx.get_installed_solc_versions()]
    if version not in installed:
        logging.info(f"Installing solc {version}...")
        solcx.install_solc(version)


def build_artifact(contract_name, compiled, solc_version, networks=None):
    return {
        'contractName': contract_name,
        'abi': compiled['abi'],
        'bytecode': '0x' + compiled['bin'],
        'deployedBytecode': '0x' + compiled['bin-runtime'],
        'compiler': {'name': 'solc', 'version': solc_version},
        'networks': networks or {},
    }


def compile_contracts(contracts_dir=CONTRACTS_DIR, output_dir=ARTIFACTS_DIR, solc_version=None):
    solc_version = solc_version or get_solc_version()
    ensure_solc(solc_version)

    source_files = sorted(
        os.path.join(contracts_dir, filename)
        for filename in os.listdir(contracts_dir)
        if filename.endswith('.sol')
    )
    if not source_files:
        raise FileNotFoundError(f"No Solidity sources found in {contracts_dir}")

    compiled = solcx.compile_files(
        source_files,
        output_values=['abi', 'bin', 'bin-runtime'],
        solc_version=solc_version,
    )

    artifacts = {}
    for contract_id, contract_interface in compiled.items():
        # contract_id is "<source path>:<contract name>"
        contract_name = contract_id.rsplit(':', 1)[-1]
        if not contract_interface['bin']:
            continue  # interfaces and abstract contracts

        # Keep the deployment records of a previous build
        existing_path = os.path.join(output_dir, f"{contract_name}.json")
        networks = {}
        if os.path.exists(existing_path):
            try:
                networks = load_artifact(contract_name, output_dir).get('networks', {})
            except ValueError:
                networks = {}

        artifact = build_artifact(contract_name, contract_interface, solc_version, networks)
        save_artifact(artifact, output_dir)
        artifacts[contract_name] = artifact

    logging.info(f"Compiled {', '.join(sorted(artifacts))} with solc {solc_version}.")
    return artifacts


if __name__ == "__main__":
    compile_contracts()
    print(f"Contracts compiled from {CONTRACTS_DIR} to {ARTIFACTS_DIR}.")
