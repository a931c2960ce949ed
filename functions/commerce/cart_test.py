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


import unittest

from commerce import cart
from commerce.cart import (
    AddItem,
    CartItem,
    CartState,
    ClearCart,
    RemoveItem,
    UpdateQuantity,
)

CREATINE = CartItem("Creatine", brand="Acme", price="$29.99", asin="B00E9M4XEE")
FISH_OIL = CartItem("Fish Oil", brand="Acme", price="$15.50 USD", asin="B00CAZAU62")


class CartReducerTest(unittest.TestCase):

    def test_add_new_item_starts_at_one(self):
        state = cart.cart_reducer(CartState(), AddItem(CartItem("Zinc", quantity=7)))
        self.assertEqual(state.items[0].quantity, 1)

    def test_add_existing_item_increments(self):
        state = cart.cart_reducer(CartState(), AddItem(CREATINE))
        state = cart.cart_reducer(state, AddItem(CREATINE))
        self.assertEqual(len(state.items), 1)
        self.assertEqual(state.items[0].quantity, 2)

    def test_reducer_does_not_mutate_state(self):
        before = cart.cart_reducer(CartState(), AddItem(CREATINE))
        after = cart.cart_reducer(before, AddItem(CREATINE))
        self.assertEqual(before.items[0].quantity, 1)
        self.assertIsNot(before, after)

    def test_remove_and_clear(self):
        state = cart.cart_reducer(CartState(), AddItem(CREATINE))
        state = cart.cart_reducer(state, AddItem(FISH_OIL))

        removed = cart.cart_reducer(state, RemoveItem("Creatine"))
        self.assertEqual([i.supplement_name for i in removed.items], ["Fish Oil"])
        self.assertEqual(cart.cart_reducer(state, ClearCart()), CartState())

    def test_update_quantity_drops_non_positive(self):
        state = cart.cart_reducer(CartState(), AddItem(CREATINE))
        state = cart.cart_reducer(state, UpdateQuantity("Creatine", 3))
        self.assertEqual(state.items[0].quantity, 3)

        state = cart.cart_reducer(state, UpdateQuantity("Creatine", 0))
        self.assertEqual(state.items, ())

    def test_unknown_action_returns_same_state(self):
        state = cart.cart_reducer(CartState(), AddItem(CREATINE))
        self.assertIs(cart.cart_reducer(state, "bogus"), state)


class CartHelpersTest(unittest.TestCase):

    def test_parse_price(self):
        self.assertEqual(cart.parse_price("$29.99"), 29.99)
        self.assertEqual(cart.parse_price("24.50 USD"), 24.5)
        self.assertEqual(cart.parse_price("Call for price"), 0.0)
        self.assertEqual(cart.parse_price(""), 0.0)

    def test_cart_from_items_merges_duplicates(self):
        state = cart.cart_from_items(
            [CREATINE, FISH_OIL, CartItem("Creatine", price="$29.99", quantity=2)]
        )
        self.assertEqual(
            [(i.supplement_name, i.quantity) for i in state.items],
            [("Creatine", 3), ("Fish Oil", 1)],
        )
        self.assertEqual(cart.item_count(state), 4)
        self.assertEqual(cart.cart_subtotal(state), 105.47)

    def test_checkout_url(self):
        state = cart.cart_from_items([CREATINE])
        self.assertEqual(
            cart.checkout_url(state, tag="t-20"),
            "https://www.amazon.com/gp/aws/cart/add.html?AssociateTag=t-20"
            "&ASIN.1=B00E9M4XEE&Quantity.1=1",
        )


if __name__ == "__main__":
    unittest.main()
