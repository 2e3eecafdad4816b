"""
Gradio storefront UI over the REST API.

- Browse: search, category, price range, rating floor, sort, pagination
- Cart: add by product id, view, checkout
- Wishlist: save and view
- Orders: history with line items

Usage:
    1. Start the API server:
       PYTHONPATH=src uvicorn api.app:app --port 8000

    2. Run this script:
       python scripts/storefront_gradio.py

    3. Open http://localhost:7860 in your browser
"""

import html
import json
import os
import sys
import time

import gradio as gr
import requests

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

API_URL = os.getenv("API_URL", "http://localhost:8000")

SORT_OPTIONS = [
    ("Relevance", "relevance"),
    ("Price: low to high", "price-low"),
    ("Price: high to low", "price-high"),
    ("Rating: high to low", "rating-high"),
    ("Rating: low to high", "rating-low"),
    ("Newest", "newest"),
]


# Generate JWT token for auth
def _make_token(user_id: str = "gradio-shopper") -> str:
    sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))
    from dotenv import load_dotenv
    load_dotenv(os.path.join(os.path.dirname(__file__), '..', '.env'))
    import jwt as pyjwt
    secret = os.getenv("SUPABASE_JWT_SECRET")
    user_id = os.getenv("GRADIO_USER_ID", user_id)
    now = int(time.time())
    return pyjwt.encode({
        "sub": user_id, "aud": "authenticated", "role": "authenticated",
        "email": f"{user_id}@test.com", "exp": now + 86400, "iat": now,
    }, secret, algorithm="HS256")


TOKEN = _make_token()
HEADERS = {"Authorization": f"Bearer {TOKEN}", "Content-Type": "application/json"}

CUSTOM_CSS = """
.result-card { display: flex; gap: 12px; padding: 10px; border-bottom: 1px solid #eee; }
.card-image { width: 96px; height: 96px; object-fit: contain; }
.card-image-placeholder { width: 96px; height: 96px; background: #f3f3f3; color: #999;
    display: flex; align-items: center; justify-content: center; font-size: 11px; }
.card-title { font-weight: 600; }
.card-price { color: #b12704; }
.card-was { color: #888; text-decoration: line-through; margin-left: 6px; }
.card-id { font-family: monospace; font-size: 11px; color: #888; }
"""


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def _build_product_card(i: int, p: dict) -> str:
    """Build an HTML card for a single product."""
    name = html.escape(p.get("productName", ""))
    img_url = p.get("imgLink") or ""
    if img_url:
        img_html = f'<img class="card-image" src="{html.escape(img_url)}" loading="lazy" />'
    else:
        img_html = '<div class="card-image-placeholder">No Image</div>'

    rating = p.get("rating")
    rating_str = f"{rating:.1f}&#9733; ({p.get('ratingCount') or 0})" if rating is not None else "unrated"

    was = ""
    if p.get("actualPrice") and p.get("actualPrice") != p.get("discountedPrice"):
        was = f'<span class="card-was">{html.escape(p["actualPrice"])}</span>'

    return f"""
<div class="result-card">
  {img_html}
  <div>
    <div class="card-title">#{i + 1} {name[:120]}</div>
    <div><span class="card-price">{html.escape(p.get('discountedPrice', ''))}</span>{was}
         {html.escape(p.get('discountPercentage') or '')}</div>
    <div>{rating_str} &middot; {html.escape(p.get('category', '').replace('|', ' > '))}</div>
    <div class="card-id">{html.escape(p.get('id', ''))}</div>
  </div>
</div>"""


def _error(r: requests.Response) -> str:
    return f"**Error {r.status_code}:** {r.text[:300]}"


# ---------------------------------------------------------------------------
# API calls
# ---------------------------------------------------------------------------

def load_categories():
    try:
        r = requests.get(f"{API_URL}/api/categories", headers=HEADERS, timeout=10)
        if r.status_code == 200:
            return [""] + r.json()
    except requests.RequestException as e:
        print(f"Could not load categories: {e}")
    return [""]


def do_browse(search, category, price_min, price_max, rating, sort_by, page, limit):
    params = {"page": int(page), "limit": int(limit), "sortBy": sort_by}
    if search and search.strip():
        params["search"] = search.strip()
    if category:
        params["category"] = category
    if price_min:
        params["priceMin"] = str(price_min)
    if price_max:
        params["priceMax"] = str(price_max)
    if rating:
        params["rating"] = str(rating)

    try:
        t = time.time()
        r = requests.get(f"{API_URL}/api/products", params=params, headers=HEADERS, timeout=30)
        elapsed = time.time() - t
        if r.status_code != 200:
            return _error(r), ""

        data = r.json()
        products = data["products"]
        pagination = data["pagination"]
        meta = (
            f"**Total:** {pagination['total']} | **Page:** {pagination['page']}/{pagination['totalPages']} "
            f"| **Round-trip:** {elapsed * 1000:.0f}ms"
        )
        if not products:
            return meta, "No products found."
        return meta, "\n".join(_build_product_card(i, p) for i, p in enumerate(products))

    except requests.ConnectionError:
        return "**Connection error** - is the API server running on " + API_URL + "?", ""


def add_to_cart(product_id, quantity):
    r = requests.post(
        f"{API_URL}/api/cart",
        json={"productId": product_id.strip(), "quantity": int(quantity)},
        headers=HEADERS,
        timeout=10,
    )
    if r.status_code != 200:
        return _error(r)
    return f"Added. Line quantity is now {r.json()['quantity']}."


def add_to_wishlist(product_id):
    r = requests.post(f"{API_URL}/api/wishlist", json={"productId": product_id.strip()}, headers=HEADERS, timeout=10)
    return "Saved to wishlist." if r.status_code == 200 else _error(r)


def view_cart():
    r = requests.get(f"{API_URL}/api/cart", headers=HEADERS, timeout=10)
    if r.status_code != 200:
        return _error(r)
    items = r.json()
    if not items:
        return "Cart is empty."
    lines = [
        f"- {item['quantity']} x {item['product']['productName'][:70]} ({item['product']['discountedPrice']})"
        for item in items
    ]
    return "\n".join(lines)


def view_wishlist():
    r = requests.get(f"{API_URL}/api/wishlist", headers=HEADERS, timeout=10)
    if r.status_code != 200:
        return _error(r)
    items = r.json()
    if not items:
        return "Wishlist is empty."
    return "\n".join(f"- {item['product']['productName'][:80]} (`{item['productId']}`)" for item in items)


def checkout():
    r = requests.post(f"{API_URL}/api/checkout", headers=HEADERS, timeout=15)
    if r.status_code != 200:
        return _error(r)
    order = r.json()["order"]
    return f"Order `{order['id']}` placed: total {order['totalAmount']} ({len(order['items'])} lines)."


def view_orders():
    r = requests.get(f"{API_URL}/api/orders", headers=HEADERS, timeout=15)
    if r.status_code != 200:
        return _error(r), ""
    orders = r.json()
    summary = f"{len(orders)} orders" if orders else "No orders yet."
    return summary, json.dumps(orders, indent=2)


def check_health():
    try:
        r = requests.get(f"{API_URL}/health/detailed", timeout=5)
        data = r.json()
        checks = data.get("checks", {})
        return (
            f"**Status:** {data.get('status')} | Supabase: {checks.get('supabase', {}).get('status')} "
            f"| Semantic search: {checks.get('semantic_search', {}).get('status')}"
        )
    except requests.RequestException as e:
        return f"**[DOWN]** {e}"


# ---------------------------------------------------------------------------
# UI
# ---------------------------------------------------------------------------

with gr.Blocks(title="Storefront") as app:
    gr.Markdown("# Storefront")

    with gr.Row():
        health_btn = gr.Button("Check API Health", size="sm", variant="secondary")
        health_out = gr.Markdown("")
    health_btn.click(check_health, outputs=health_out)

    with gr.Tabs():
        with gr.TabItem("Browse"):
            with gr.Row():
                with gr.Column(scale=1):
                    search = gr.Textbox(label="Search", placeholder="noise cancelling headphones")
                    category = gr.Dropdown(load_categories(), label="Category", value="")
                    with gr.Row():
                        price_min = gr.Number(label="Min price", value=None)
                        price_max = gr.Number(label="Max price", value=None)
                    rating = gr.Slider(0, 5, value=0, step=0.5, label="Minimum rating")
                    sort_by = gr.Dropdown(SORT_OPTIONS, value="relevance", label="Sort")
                    with gr.Row():
                        page = gr.Number(label="Page", value=1, minimum=1, step=1)
                        limit = gr.Number(label="Per page", value=20, minimum=1, maximum=100, step=1)
                    browse_btn = gr.Button("Search", variant="primary")
                with gr.Column(scale=3):
                    browse_meta = gr.Markdown("")
                    browse_out = gr.HTML("")

            inputs = [search, category, price_min, price_max, rating, sort_by, page, limit]
            browse_btn.click(do_browse, inputs=inputs, outputs=[browse_meta, browse_out])
            search.submit(do_browse, inputs=inputs, outputs=[browse_meta, browse_out])

        with gr.TabItem("Cart & Wishlist"):
            with gr.Row():
                product_id = gr.Textbox(label="Product ID")
                quantity = gr.Number(label="Quantity", value=1, minimum=1, step=1)
            with gr.Row():
                cart_btn = gr.Button("Add to cart", variant="primary")
                wish_btn = gr.Button("Save to wishlist")
            action_out = gr.Markdown("")
            cart_btn.click(add_to_cart, inputs=[product_id, quantity], outputs=action_out)
            wish_btn.click(add_to_wishlist, inputs=product_id, outputs=action_out)

            with gr.Row():
                view_cart_btn = gr.Button("View cart")
                view_wish_btn = gr.Button("View wishlist")
                checkout_btn = gr.Button("Checkout", variant="primary")
            list_out = gr.Markdown("")
            view_cart_btn.click(view_cart, outputs=list_out)
            view_wish_btn.click(view_wishlist, outputs=list_out)
            checkout_btn.click(checkout, outputs=list_out)

        with gr.TabItem("Orders"):
            orders_btn = gr.Button("Load orders", variant="primary")
            orders_meta = gr.Markdown("")
            orders_raw = gr.Code(language="json", label="Orders")
            orders_btn.click(view_orders, outputs=[orders_meta, orders_raw])


# ---------------------------------------------------------------------------
# Launch
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    print(f"Connecting to API at {API_URL}")
    print(f"Health: {check_health()}")
    app.launch(server_name="0.0.0.0", server_port=7860, share=False, theme=gr.themes.Soft(), css=CUSTOM_CSS)
