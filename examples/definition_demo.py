# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Definition Demo: Structured Feedback Instead of a Boolean.

This demo builds the same order validation twice, once with a definition
function and once from a YAML rules file, and shows the ResultMap each one
produces for a few inputs. It finishes with a cross-field rule that reads a
stashed value and a rules file with a typo that is rejected at load time.

Run with:
    python examples/definition_demo.py
"""

import asyncio
import os
import tempfile

from valerie import ConfigurationError, FileDefinitionLoader, Idator, evaluate, evaluate_async, format_result_map


ORDERS = [
    {"id": "A-100", "customer": "Ada", "items": [{"sku": "X1", "qty": 2}]},
    {"id": "100", "customer": None, "items": [{"sku": "X1", "qty": 0}, {"sku": None, "qty": 1}]},
    None,
]


def order_definition(d):
    d.require(d.is_not_null())
    d.define(d.is_instance_of(dict) & d.has_only_fields_in(["id", "customer", "items"]))
    d.define_children({
        "id": lambda i: i.define(i.is_not_null() & i.matches_re(r"[A-Z]-\d+")),
        "customer": lambda c: c.define(c.is_not_null() & c.has_size_gte(1)),
    })
    d.sub_define({
        "items": lambda items: items.define(
            items.has_size_gte(1)
            + items.with_each_value(lambda item: item.sub_define({
                "sku": lambda sku: sku.define(sku.is_not_null()),
                "qty": lambda qty: qty.define(qty.has_value_gte(1)),
            }))
        ),
    })


ORDER_RULES = """
require: [is_not_null]
rules:
  - is_instance_of: {type: dict}
children:
  id:
    rules:
      - is_not_null
      - matches_re: {pattern: "[A-Z]-\\\\d+"}
  customer:
    rules: [is_not_null]
"""


def show(title, check):
    print("\n" + "=" * 70)
    print(title)
    print("=" * 70)
    for order in ORDERS:
        result = evaluate(check, order, name="order")
        print(f"\n  Input: {order!r}")
        print("  " + format_result_map(result, "order").replace("\n", "\n  "))


def demo_definition_function():
    show("DEMO 1: Definition function", Idator().using(order_definition))


def demo_rules_file():
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        f.write(ORDER_RULES)
        temp_path = f.name
    try:
        os.environ["VALERIE_RULES_FILE"] = temp_path
        show("DEMO 2: YAML rules file", FileDefinitionLoader().load())
    finally:
        os.environ.pop("VALERIE_RULES_FILE", None)
        os.unlink(temp_path)


def demo_stash():
    print("\n" + "=" * 70)
    print("DEMO 3: Cross-field rule through the stash")
    print("=" * 70)

    def passwords(d):
        d.stash_value_as("form")
        d.define_children({
            "confirm": lambda c: c.define(c.satisfies(
                lambda value, ctx: value == ctx.get_stashed("form")["password"],
                msg="does not match password",
                code="MISMATCH",
            )),
        })

    check = Idator().using(passwords)
    for form in ({"password": "s3cret", "confirm": "s3cret"}, {"password": "s3cret", "confirm": "secret"}):
        print(f"\n  Input: {form!r}")
        print(f"  Result: {check(form)!r}")


def demo_typo_rejected():
    print("\n" + "=" * 70)
    print("DEMO 4: Unknown rule names are rejected at load time")
    print("=" * 70)
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        f.write("rules: [is_not_nul]\n")
        temp_path = f.name
    try:
        FileDefinitionLoader(temp_path).load()
        print("  Result: FAIL - rules loaded (should have been rejected)")
    except ConfigurationError as e:
        print("  Result: SUCCESS - rules rejected at load time")
        print(f"    {e}")
    finally:
        os.unlink(temp_path)


async def demo_async():
    print("\n" + "=" * 70)
    print("DEMO 5: Async evaluation with a deadline")
    print("=" * 70)
    check = Idator().using(order_definition)
    result = await evaluate_async(check, ORDERS[0], timeout=1.0, name="order")
    print(f"\n  Result: {result!r}")


def main():
    demo_definition_function()
    demo_rules_file()
    demo_stash()
    demo_typo_rejected()
    asyncio.run(demo_async())


if __name__ == "__main__":
    main()
