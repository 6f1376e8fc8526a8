import pandas as pd
import pytest

from Sale.sales_report import op_sales_report, summarize_by_buyer
from Shared.web3_utils import get_deployment_block
from Sale.token_sale import buy_tokens


def test_sales_report_lists_every_purchase(web3, deployed, tmp_path):
    _, token_sale = deployed
    first, second = web3.eth.accounts[1], web3.eth.accounts[2]
    buy_tokens(web3, token_sale, first, 10)
    buy_tokens(web3, token_sale, second, 5)
    buy_tokens(web3, token_sale, first, 2)

    output_path = tmp_path / "report" / "sales_report.csv"
    df = op_sales_report(token_sale, str(output_path))

    assert len(df) == 3
    assert df["tokens"].tolist() == [10, 5, 2]
    assert output_path.exists()
    assert len(pd.read_csv(output_path)) == 3

    summary = summarize_by_buyer(df)
    assert summary.loc[0, "buyer"] == first
    assert summary.loc[0, "tokens"] == 12
    assert summary.loc[0, "purchases"] == 2
    assert summary.loc[0, "value_eth"] == pytest.approx(0.12)


def test_sales_report_empty_sale(deployed, tmp_path):
    _, token_sale = deployed

    df = op_sales_report(token_sale, str(tmp_path / "sales_report.csv"))

    assert df.empty
    assert summarize_by_buyer(df).empty


def test_sales_report_scans_from_deployment_block(web3, deployed, artifacts_dir, tmp_path):
    _, token_sale = deployed
    buy_tokens(web3, token_sale, web3.eth.accounts[1], 4)

    df = op_sales_report(token_sale, str(tmp_path / "sales_report.csv"), artifacts_dir=artifacts_dir)

    assert get_deployment_block(web3, "TokenSale", token_sale.address, artifacts_dir) > 0
    assert df["tokens"].tolist() == [4]
