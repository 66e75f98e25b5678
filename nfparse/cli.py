# File: nfparse/cli.py
import json
import logging
from pathlib import Path

import click
import pandas as pd

from nfparse.errors import InvoiceParseError, StatementParseError
from nfparse.importer import import_invoices, load_invoices, parse_invoice_file
from nfparse.parsing.ofx import parse_ofx
from nfparse.parsing.utils import decode_text_bytes
from nfparse.reconcile import suggest_matches


@click.group()
@click.option("--verbose", is_flag=True, default=False, help="Log de depuração")
def main(verbose):
    """nfparse – leitura de notas fiscais e conciliação com extrato OFX."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO)


@main.command()
@click.argument("invoice", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, default=False, help="Saída em JSON")
def parse(invoice, as_json):
    """Extrai os dados de um XML de nota fiscal."""
    try:
        fact = parse_invoice_file(invoice)
    except InvoiceParseError as e:
        click.echo(f"[ERRO] {Path(invoice).name}: {e}")
        raise SystemExit(1)

    data = fact.to_dict()
    if as_json:
        click.echo(json.dumps(data, default=str, ensure_ascii=False, indent=2))
        return
    for key, value in data.items():
        click.echo(f"{key:32} {value}")


@main.command()
@click.argument("paths", type=click.Path(exists=True), nargs=-1)
@click.option(
    "--csv",
    "csv_out",
    type=click.Path(dir_okay=False),
    default=None,
    help="Grava o resultado em CSV",
)
def batch(paths, csv_out):
    """Importa vários XML (arquivos ou pastas, busca recursiva)."""
    if not paths:
        click.echo("Informe ao menos um arquivo ou pasta.")
        return

    df = import_invoices(paths)
    for _, row in df[df["status"] == "error"].iterrows():
        click.echo(f"[ERRO] {Path(row['file']).name}: {row['error']}")
    for _, row in df[df["status"] == "duplicate"].iterrows():
        click.echo(f"[DUPLICADO] {Path(row['file']).name}")

    ok = df[df["status"] == "ok"]
    if csv_out:
        df.to_csv(csv_out, index=False)
        click.echo(f"{len(df)} linhas gravadas em {csv_out}")
    if not ok.empty:
        cols = [
            c
            for c in (
                "file",
                "dialect",
                "document_number",
                "issuer_name",
                "issue_date",
                "gross_value",
                "net_value_as_declared",
                "is_municipal_tax_withheld",
            )
            if c in ok.columns
        ]
        click.echo(ok[cols].to_string(index=False))
    click.echo(f"OK: {len(ok)} / {len(df)}")


def _load_statement(path):
    try:
        return parse_ofx(decode_text_bytes(Path(path).read_bytes()))
    except StatementParseError as e:
        click.echo(f"[ERRO] {Path(path).name}: {e}")
        raise SystemExit(1)


@main.command()
@click.argument("statement", type=click.Path(exists=True, dir_okay=False))
def statement(statement):
    """Mostra conta e transações de um extrato OFX."""
    data = _load_statement(statement)

    acct = data.account
    click.echo(
        f"Banco {acct.bank_id or '-'} agência {acct.branch_id or '-'} "
        f"conta {acct.account_id or '-'} ({data.currency})"
    )
    if data.balance is not None:
        click.echo(f"Saldo: {data.balance}")
    rows = [
        {
            "id": t.id,
            "date": t.date.date().isoformat() if t.date else "",
            "kind": t.kind,
            "amount": t.amount,
            "description": t.description,
        }
        for t in data.transactions
    ]
    if rows:
        click.echo(pd.DataFrame(rows, dtype=object).to_string(index=False))
    click.echo(f"{len(rows)} transações")


@main.command()
@click.argument("statement", type=click.Path(exists=True, dir_okay=False))
@click.argument("paths", type=click.Path(exists=True), nargs=-1)
def reconcile(statement, paths):
    """Sugere a nota fiscal correspondente a cada crédito do extrato."""
    data = _load_statement(statement)

    invoices = load_invoices(paths)
    credits = [t for t in data.transactions if t.kind == "credit"]
    if not credits:
        click.echo("Nenhum crédito no extrato.")
        return
    df = suggest_matches(credits, invoices)
    click.echo(df.to_string(index=False))
    matched = int((df["confidence"] != "").sum())
    click.echo(f"Sugestões: {matched} / {len(df)}")


if __name__ == "__main__":
    main()
