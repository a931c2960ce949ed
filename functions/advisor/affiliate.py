# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================

"""Affiliate link synthesis for retailer search and cart pages."""

from typing import Iterable, Optional, Protocol
from urllib.parse import quote, urlencode

from shared.constants import AFFILIATE_TAG

AMAZON_SEARCH_URL = "https://www.amazon.com/s"
AMAZON_CART_URL = "https://www.amazon.com/gp/aws/cart/add.html"

# Characters encodeURIComponent leaves alone; links already shared by the web
# client were built that way.
_URI_COMPONENT_SAFE = "!~*'()"


class CartLine(Protocol):
    asin: Optional[str]
    quantity: int


def build_search_url(brand: str, supplement_name: str, tag: str = AFFILIATE_TAG) -> str:
    search_term = quote(f"{brand} {supplement_name}", safe=_URI_COMPONENT_SAFE)
    return f"{AMAZON_SEARCH_URL}?k={search_term}&tag={tag}"


def build_cart_url(items: Iterable[CartLine], tag: str = AFFILIATE_TAG) -> str:
    """
    Builds an Amazon "add to cart" URL for several items at once.

    Items without an ASIN are skipped; the remaining items are numbered
    ASIN.1, ASIN.2, ... without gaps.

    Raises:
        ValueError: If no item has an ASIN.
    """
    params = [("AssociateTag", tag)]
    item_number = 0
    for item in items:
        if not item.asin:
            continue
        item_number += 1
        params.append((f"ASIN.{item_number}", item.asin))
        params.append((f"Quantity.{item_number}", str(item.quantity)))

    if item_number == 0:
        raise ValueError("No cart items have an Amazon ASIN.")
    return f"{AMAZON_CART_URL}?{urlencode(params)}"
