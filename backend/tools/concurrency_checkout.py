import os
import sys
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import requests
import concurrent.futures
import argparse
import json

BASE = os.environ.get("MARKETPLACE_BASE", "http://127.0.0.1:8000")

def order_task(i, payload, post=None):
    post = post or (lambda url, **kw: requests.post(f"{BASE}{url}", timeout=20, **kw))
    try:
        r = post("/orders", json=payload)
        return (i, "order", r.status_code, r.text)
    except requests.RequestException as e:
        return (i, "order", "ERR", str(e))

def run_checkout_concurrent(workers, item_id, qty, post=None):
    """
    Fire `workers` simultaneous checkouts of `qty` units of one item and
    return the fulfilled quantity of every successful order. Against a
    correct backend the sum never exceeds the stock the item started with.
    """
    print(f"Running checkout test: workers={workers}, item_id={item_id}, qty={qty}")
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as ex:
        futures = [
            ex.submit(
                order_task,
                i,
                {
                    "email": f"buyer{i}@example.com",
                    "cart": [{"item_id": item_id, "quantity": qty}],
                },
                post,
            )
            for i in range(workers)
        ]
        results = [f.result() for f in futures]
    fulfilled = []
    for r in results:
        print(r)
        if r[2] == 201:
            body = json.loads(r[3])
            fulfilled.append(sum(line["quantity"] for line in body["lines"]))
    print("Fulfilled per order:", fulfilled, "sum:", sum(fulfilled))
    return fulfilled

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Fire concurrent checkouts at one item and report what each got.")
    parser.add_argument("item_id")
    parser.add_argument("--qty", type=int, default=1)
    parser.add_argument("--workers", type=int, default=8)
    args = parser.parse_args()

    run_checkout_concurrent(args.workers, args.item_id, args.qty)
