"""
Tests for the CSV product importer.
"""

import pytest

from catalog.importer import iter_batches, load_products, to_records, upsert_batch
from config.database import StoreError
from fake_supabase import FakeSupabase

CSV_HEADER = (
    "product_id,product_name,category,discounted_price,actual_price,discount_percentage,"
    "rating,rating_count,about_product,user_id,review_title,img_link,product_link\n"
)


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / "products.csv"
    path.write_text(
        CSV_HEADER
        + 'B01,"Cable, braided",Computers&Accessories|Cables,"₹399","₹1,099",64%,4.2,"24,269",Fast,U1,Great,http://i/1,http://p/1\n'
        + 'B01,"Cable, braided",Computers&Accessories|Cables,"₹399","₹1,099",64%,4.2,"24,269",Fast,U2,Meh,http://i/1,http://p/1\n'
        + "B02,Speaker,Electronics|Audio,,₹999,,|,,,U3,Ok,,\n"
        + " ,No id,Electronics,₹10,₹20,50%,4.0,1,x,U4,x,,\n",
        encoding="utf-8",
    )
    return path


class TestLoadProducts:

    def test_deduplicates_reviews(self, csv_file):
        df = load_products(csv_file)

        assert list(df["id"]) == ["B01", "B02"]

    def test_review_columns_dropped(self, csv_file):
        df = load_products(csv_file)

        assert "user_id" not in df.columns
        assert "review_title" not in df.columns
        assert "product_name" in df.columns

    def test_missing_required_column(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("name,price\nx,1\n", encoding="utf-8")

        with pytest.raises(ValueError, match="product_id"):
            load_products(path)


class TestToRecords:

    def test_values_cleaned(self, csv_file):
        first, second = to_records(load_products(csv_file))

        assert first["product_name"] == "Cable, braided"
        assert first["rating"] == 4.2
        assert first["rating_count"] == "24,269"
        assert second["discounted_price"] == ""
        assert second["rating"] is None
        assert second["img_link"] is None
        assert second["discount_percentage"] is None


class TestUpsert:

    def test_batches(self):
        records = [{"id": str(i)} for i in range(5)]

        assert [len(b) for b in iter_batches(records, 2)] == [2, 2, 1]

    def test_existing_products_untouched(self, csv_file):
        db = FakeSupabase({"products": [{"id": "B01", "product_name": "Original"}]})

        sent = upsert_batch(db, to_records(load_products(csv_file)))

        assert sent == 2
        names = {row["id"]: row["product_name"] for row in db.tables["products"]}
        assert names == {"B01": "Original", "B02": "Speaker"}

    def test_store_failure(self):
        db = FakeSupabase()
        db.fail("products")

        with pytest.raises(StoreError):
            upsert_batch(db, [{"id": "X", "product_name": "x"}])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
