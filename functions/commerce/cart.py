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

"""
Shopping cart state.

The cart lives on the client; this module is the reducer both sides agree on,
plus the totals and retailer link used at checkout.
"""

import dataclasses
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple, Union

from advisor import affiliate
from shared.constants import AFFILIATE_TAG

_NON_NUMERIC = re.compile(r"[^0-9.-]+")


@dataclass(frozen=True)
class CartItem:
    supplement_name: str
    brand: str = ""
    price: str = ""
    asin: Optional[str] = None
    image_url: Optional[str] = None
    quantity: int = 1


@dataclass(frozen=True)
class CartState:
    items: Tuple[CartItem, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class AddItem:
    item: CartItem


@dataclass(frozen=True)
class RemoveItem:
    supplement_name: str


@dataclass(frozen=True)
class UpdateQuantity:
    supplement_name: str
    quantity: int


@dataclass(frozen=True)
class ClearCart:
    pass


CartAction = Union[AddItem, RemoveItem, UpdateQuantity, ClearCart]


def cart_reducer(state: CartState, action: CartAction) -> CartState:
    """Returns the next cart state. `state` is never modified."""
    if isinstance(action, AddItem):
        name = action.item.supplement_name
        if any(item.supplement_name == name for item in state.items):
            return CartState(
                items=tuple(
                    dataclasses.replace(item, quantity=item.quantity + 1)
                    if item.supplement_name == name
                    else item
                    for item in state.items
                )
            )
        return CartState(
            items=state.items + (dataclasses.replace(action.item, quantity=1),)
        )

    if isinstance(action, RemoveItem):
        return CartState(
            items=tuple(
                item
                for item in state.items
                if item.supplement_name != action.supplement_name
            )
        )

    if isinstance(action, UpdateQuantity):
        updated = (
            dataclasses.replace(item, quantity=action.quantity)
            if item.supplement_name == action.supplement_name
            else item
            for item in state.items
        )
        return CartState(items=tuple(item for item in updated if item.quantity > 0))

    if isinstance(action, ClearCart):
        return CartState()

    return state


def parse_price(price: str) -> float:
    """Parses display prices like "$29.99" or "24.50 USD". Unparsable → 0."""
    try:
        return float(_NON_NUMERIC.sub("", price or ""))
    except ValueError:
        return 0.0


def cart_subtotal(state: CartState) -> float:
    return round(
        sum(parse_price(item.price) * item.quantity for item in state.items), 2
    )


def cart_from_items(items: Iterable[CartItem]) -> CartState:
    """
    Builds a cart from client-submitted lines.

    Each line is added then set to its requested quantity, so duplicate names
    collapse into one line and zero quantities are dropped.
    """
    state = CartState()
    for item in items:
        state = cart_reducer(state, AddItem(item))
        existing = next(
            i for i in state.items if i.supplement_name == item.supplement_name
        )
        quantity = existing.quantity - 1 + item.quantity
        state = cart_reducer(state, UpdateQuantity(item.supplement_name, quantity))
    return state


def checkout_url(state: CartState, tag: str = AFFILIATE_TAG) -> str:
    return affiliate.build_cart_url(state.items, tag=tag)


def item_count(state: CartState) -> int:
    return sum(item.quantity for item in state.items)


def as_list(state: CartState) -> List[dict]:
    return [dataclasses.asdict(item) for item in state.items]
