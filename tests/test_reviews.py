"""Review tests - customer reviews and restaurant replies."""

from httpx import AsyncClient

from tests.conftest import auth_header, make_order, make_token

CUSTOMER_REVIEWS = "/api/v1/customer/reviews"
RESTAURANT_REVIEWS = "/api/v1/restaurant/reviews"


async def _review(client: AsyncClient, order, headers, rating: int = 5, comment: str | None = "Great momo") -> dict:
    res = await client.post(
        CUSTOMER_REVIEWS,
        json={"order_id": str(order.id), "rating": rating, "comment": comment},
        headers=headers,
    )
    assert res.status_code == 201, res.text
    return res.json()


class TestCustomerReviews:

    async def test_review_updates_ratings(
        self, client: AsyncClient, db, customer, restaurant, restaurant_owner, customer_headers
    ):
        first = await make_order(db, customer, restaurant, status="delivered")
        second = await make_order(db, customer, restaurant, status="delivered")
        await _review(client, first, customer_headers, rating=5)
        data = await _review(client, second, customer_headers, rating=2)
        assert data["status"] == "published"
        assert data["restaurant_id"] == str(restaurant.id)

        await db.refresh(restaurant)
        await db.refresh(restaurant_owner)
        assert restaurant.rating_count == 2
        assert restaurant.rating_average == 3.5
        assert restaurant_owner.rating_average == 3.5

    async def test_only_delivered_orders(self, client: AsyncClient, order, customer_headers):
        res = await client.post(CUSTOMER_REVIEWS, json={"order_id": str(order.id), "rating": 4}, headers=customer_headers)
        assert res.status_code == 400
        assert res.json()["message"] == "You can only review delivered orders"

    async def test_one_review_per_order(self, client: AsyncClient, db, customer, restaurant, customer_headers):
        done = await make_order(db, customer, restaurant, status="delivered")
        await _review(client, done, customer_headers)
        res = await client.post(CUSTOMER_REVIEWS, json={"order_id": str(done.id), "rating": 1}, headers=customer_headers)
        assert res.status_code == 400
        assert res.json()["message"] == "You have already reviewed this order"

    async def test_cannot_review_others_order(
        self, client: AsyncClient, db, customer, restaurant, other_customer_headers
    ):
        done = await make_order(db, customer, restaurant, status="delivered")
        res = await client.post(
            CUSTOMER_REVIEWS, json={"order_id": str(done.id), "rating": 1}, headers=other_customer_headers
        )
        assert res.status_code == 404

    async def test_rating_range(self, client: AsyncClient, order, customer_headers):
        res = await client.post(CUSTOMER_REVIEWS, json={"order_id": str(order.id), "rating": 6}, headers=customer_headers)
        assert res.status_code == 400


class TestRestaurantReviews:

    async def test_respond_and_stats(self, client: AsyncClient, db, customer, restaurant, customer_headers, owner_headers):
        done = await make_order(db, customer, restaurant, status="delivered")
        other = await make_order(db, customer, restaurant, status="delivered")
        review = await _review(client, done, customer_headers, rating=4)
        await _review(client, other, customer_headers, rating=1, comment=None)

        res = await client.post(
            f"{RESTAURANT_REVIEWS}/{review['id']}/respond",
            json={"response": "Thanks for visiting!"},
            headers=owner_headers,
        )
        assert res.status_code == 200
        assert res.json()["response"] == "Thanks for visiting!"
        assert res.json()["responded_at"] is not None

        res = await client.get(f"{RESTAURANT_REVIEWS}/stats", headers=owner_headers)
        data = res.json()
        assert data["total_reviews"] == 2
        assert data["average_rating"] == 2.5
        assert data["distribution"]["four"] == 1
        assert data["distribution"]["one"] == 1
        assert data["response_rate"] == 50.0

        res = await client.get(RESTAURANT_REVIEWS, params={"rating": 1}, headers=owner_headers)
        assert res.json()["total"] == 1

    async def test_report_once(self, client: AsyncClient, db, customer, restaurant, customer_headers, owner_headers):
        done = await make_order(db, customer, restaurant, status="delivered")
        review = await _review(client, done, customer_headers, rating=1, comment="Spam spam")
        url = f"{RESTAURANT_REVIEWS}/{review['id']}/report"

        res = await client.post(url, json={"reason": "Spam"}, headers=owner_headers)
        assert res.json()["status"] == "reported"
        assert res.json()["report_reason"] == "Spam"

        res = await client.post(url, json={"reason": "Spam"}, headers=owner_headers)
        assert res.status_code == 400
        assert res.json()["message"] == "Review has already been reported"

    async def test_unverified_owner_blocked(self, client: AsyncClient, pending_owner):
        res = await client.get(RESTAURANT_REVIEWS, headers=auth_header(make_token(pending_owner, "restaurant")))
        assert res.status_code == 400
        assert res.json()["message"] == "Restaurant is not verified yet"
