from __future__ import annotations

import json

import bcrypt

from marketplace.adapters.inbound.cli import main, run_place_order
from marketplace.core.domain.service.place_order_service import (
    PlaceOrderDeps,
    PlaceOrderService,
)


def test_hash_secret_prints_verifiable_hash(capsys):
    assert main(["hash-secret", "s3cret", "--rounds", "4"]) == 0

    hashed = capsys.readouterr().out.strip()
    assert bcrypt.checkpw(b"s3cret", hashed.encode())


def test_seed_then_place_order(tmp_path, monkeypatch, capsys):
    data_dir = tmp_path / "data"
    assert main(["seed", "--data-dir", str(data_dir)]) == 0

    products = json.loads((data_dir / "products.json").read_text("utf-8"))["items"]
    payload = json.dumps(
        {
            "customerName": "Ada",
            "customerEmail": "ada@example.com",
            "customerPhone": "555",
            "customerAddress": "1 Main St",
            "items": [{"productId": products[0]["id"], "qty": 2}],
        }
    )

    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("MARKETPLACE_DATA_DIR", str(data_dir))
    assert main(["place-order", payload]) == 0
    assert "[ok]" in capsys.readouterr().out
    orders = json.loads((data_dir / "orders.json").read_text("utf-8"))["items"]
    assert orders[0]["total"] == 259.98


def test_data_dir_before_the_subcommand(tmp_path):
    data_dir = tmp_path / "elsewhere"

    assert main(["--data-dir", str(data_dir), "seed", "--no-demo"]) == 0

    products = json.loads((data_dir / "products.json").read_text("utf-8"))
    assert products["items"] == []
    assert (data_dir / "orders.json").exists()


def test_seed_defaults_to_configured_data_dir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("MARKETPLACE_DATA_DIR", str(tmp_path / "configured"))

    assert main(["seed"]) == 0

    assert (tmp_path / "configured" / "products.json").exists()
    assert not (tmp_path / "data").exists()


def test_place_order_reports_bad_input(documents, events, capsys):
    svc = PlaceOrderService(PlaceOrderDeps(documents=documents, events=events))

    assert run_place_order(svc, "{not json") == 2
    assert run_place_order(svc, json.dumps({"items": []})) == 1
    assert "[ng] Missing required customer field: customerName" in capsys.readouterr().out
