import importlib.util
import os

from fastapi.testclient import TestClient

from app.db import init_db
from app.main import app
from helpers import make_account, make_item, stock_of

TOOL = os.path.join(os.path.dirname(__file__), "..", "tools", "concurrency_checkout.py")

client = TestClient(app)


def _load_tool():
    spec = importlib.util.spec_from_file_location("concurrency_checkout", TOOL)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def setup_module(module):
    init_db(reset=True)


def test_checkout_tool_reports_no_oversell():
    seller_id, _ = make_account("toolseller")
    item_id = make_item(seller_id, quantity=4)
    tool = _load_tool()

    fulfilled = tool.run_checkout_concurrent(2, item_id, 3, post=client.post)

    assert len(fulfilled) == 2
    assert sum(fulfilled) == 4
    assert stock_of(item_id) == 0
