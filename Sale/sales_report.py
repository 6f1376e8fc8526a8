import os
import logging

import pandas as pd
from web3 import Web3

from Shared.config import ARTIFACTS_DIR
from Shared.web3_utils import get_deployment_block

logging.basicConfig(level=logging.INFO)

OUTPUT_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'output')
REPORT_COLUMNS = ["block", "transaction", "buyer", "tokens", "value_eth"]


def fetch_sell_events(token_sale, from_block=0):
    try:
        events = token_sale.events.Sell().get_logs(from_block=from_block)
    except Exception as e:
        logging.error(f"Failed to fetch Sell events: {e}")
        raise
    logging.info(f"Fetched {len(events)} Sell events from block {from_block}.")
    return events


# One row per Sell event; the value paid is derived from the unit price
def build_sales_dataframe(events, token_price):
    rows = []
    for event in events:
        tokens = event['args']['amount']
        rows.append({
            "block": event['blockNumber'],
            "transaction": Web3.to_hex(event['transactionHash']),
            "buyer": event['args']['buyer'],
            "tokens": tokens,
            "value_eth": float(Web3.from_wei(tokens * token_price, 'ether')),
        })
    return pd.DataFrame(rows, columns=REPORT_COLUMNS)


# This function groups the purchases per buyer (sum the tokens and the ether paid)
def summarize_by_buyer(df):
    if df.empty:
        return pd.DataFrame(columns=["buyer", "purchases", "tokens", "value_eth"])

    summary = df.groupby("buyer", as_index=False).agg(
        purchases=("transaction", "count"),
        tokens=("tokens", "sum"),
        value_eth=("value_eth", "sum"),
    )
    return summary.sort_values("tokens", ascending=False).reset_index(drop=True)


def op_sales_report(token_sale, output_path=None, from_block=None, artifacts_dir=ARTIFACTS_DIR):
    output_path = output_path or os.path.join(OUTPUT_DIR, 'sales_report.csv')
    if from_block is None:
        # No Sell event can predate the deployment of the sale contract
        from_block = get_deployment_block(token_sale.w3, "TokenSale", token_sale.address, artifacts_dir)

    token_price = token_sale.functions.tokenPrice().call()
    events = fetch_sell_events(token_sale, from_block)
    df = build_sales_dataframe(events, token_price)

    os.makedirs(os.path.dirname(output_path), exist_ok=True)
    df.to_csv(output_path, index=False)
    print(f"Sales report saved to {output_path}")
    return df
