"""상품 테스트 자산 (엔진 독립)

- 단순 dict만 보관
- pytest fixture 선언하지 않음
"""

PRODUCTS = {
    "iphone_case": {
        "id": 101,
        "title": "Apple iPhone 15 Silicone Case",
        "price": 49,
        "image_url": "https://images.example.com/101.jpg",
        "platform": "amazon",
        "source_url": "https://www.amazon.com/dp/B0CHX1",
        "created_at": "2026-10-01T08:00:00Z",
        "updated_at": "2026-10-01T08:00:00Z",
    },
    "galaxy_buds": {
        "id": 202,
        "title": "Samsung Galaxy Buds3 Pro",
        "price": 229.99,
        "image_url": "https://images.example.com/202.jpg",
        "platform": "jumia",
        "created_at": "2026-10-02T08:00:00Z",
        "updated_at": "2026-10-03T08:00:00Z",
    },
    "broken_image": {
        "id": 303,
        "title": "Tecno Spark 20 Pro",
        "price": "18999.00",
        "image_url": "not-a-url",
        "platform": "jumia",
        "created_at": "2026-10-04T08:00:00Z",
        "updated_at": "2026-10-04T08:00:00Z",
    },
}
