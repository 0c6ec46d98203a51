"""Example pandas and lxml integration for analysing parsed markup.

Parses a small sales ledger, flattens it into a DataFrame for aggregation and
rebuilds it as lxml elements for XPath queries.
"""

import pandas as pd

from tagtree.api import get_adapter, parse_text
from tagtree.tree import destroy

SALES = """
<sales_data>
    <sale id="1" date="2023-01-15">
        <product>Laptop</product>
        <category>Electronics</category>
        <price>1200.00</price>
        <quantity>2</quantity>
    </sale>
    <sale id="2" date="2023-01-16">
        <product>Mouse</product>
        <category>Electronics</category>
        <price>25.00</price>
        <quantity>5</quantity>
    </sale>
    <sale id="3" date="2023-01-17">
        <product>Desk</product>
        <category>Furniture</category>
        <price>300.00</price>
        <quantity>1</quantity>
    </sale>
</sales_data>
"""


def analyze_with_pandas(parse_result):
    print("\nDataFrame analysis")
    print("-" * 40)

    conversion = get_adapter("pandas").to_target(parse_result)
    if not conversion.success:
        print(f"   Conversion failed: {conversion.errors}")
        return

    df = conversion.converted_data
    print(f"   Rows: {len(df)}, columns: {list(df.columns)}")

    sales = df[df["tag"] == "sale"][["@id", "@date"]].reset_index(drop=True)
    fields = {}
    for tag in ("product", "category", "price", "quantity"):
        fields[tag] = df[df["tag"] == tag]["text"].reset_index(drop=True)
    ledger = pd.concat([sales, pd.DataFrame(fields)], axis=1)
    ledger["price"] = pd.to_numeric(ledger["price"])
    ledger["quantity"] = pd.to_numeric(ledger["quantity"])
    ledger["revenue"] = ledger["price"] * ledger["quantity"]

    print(ledger.to_string(index=False))
    print("\n   Revenue by category:")
    for category, revenue in ledger.groupby("category")["revenue"].sum().items():
        print(f"   - {category}: ${revenue:,.2f}")


def query_with_lxml(parse_result):
    print("\nXPath queries")
    print("-" * 40)

    conversion = get_adapter("lxml").to_target(parse_result)
    if not conversion.success:
        print(f"   Conversion failed: {conversion.errors}")
        return

    document = conversion.converted_data
    electronics = document.xpath("//sale[category='Electronics']/product/text()")
    print(f"   Electronics: {', '.join(electronics)}")
    large = document.xpath("//sale[number(quantity) >= 2]/@id")
    print(f"   Sales of two or more units: {', '.join(large)}")
    print(f"   Sales recorded: {document.xpath('count(//sale)'):.0f}")


def main():
    print("Sales ledger analysis")
    print("=" * 40)

    parse_result = parse_text(SALES)
    if not parse_result.success:
        print(f"Failed to parse: {parse_result.error}")
        return
    print(f"Parsed {parse_result.element_count} elements "
          f"in {parse_result.processing_time_ms:.2f}ms")

    analyze_with_pandas(parse_result)
    query_with_lxml(parse_result)
    destroy(parse_result)


if __name__ == "__main__":
    main()
