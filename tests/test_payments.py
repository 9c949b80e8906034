"""
Tests for payments: creation, settlement, cancellation, history and stats.
"""

import uuid

import pytest

from clipit.crud import payment as payment_crud
from clipit.models.clip import ClipStatus
from clipit.models.job import JobStatus
from clipit.models.payment import Payment, PaymentStatus
from clipit.models.user import User


@pytest.fixture
def pending_payment(db_session, job, creator, clipper, approved_clip):
    payment = Payment(
        job_id=job.id,
        clip_id=approved_clip.id,
        creator_id=creator.id,
        clipper_id=clipper.id,
        amount=50,
        status=PaymentStatus.PENDING,
    )
    db_session.add(payment)
    db_session.commit()
    db_session.refresh(payment)
    return payment


class TestPaymentCreation:
    """POST /payments"""

    def test_create_payment(self, client, job, creator, clipper, approved_clip, creator_headers):
        response = client.post(
            "/api/payments",
            json={"clip_id": str(approved_clip.id), "amount": 50, "payment_method": "paypal"},
            headers=creator_headers
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["amount"] == 50
        assert data["job_id"] == str(job.id)
        assert data["creator_id"] == str(creator.id)
        assert data["clipper_id"] == str(clipper.id)

    def test_live_clip_can_be_paid(self, client, job, clipper, accepted_application, clip_factory, creator_headers):
        clip = clip_factory(job, clipper, status=ClipStatus.LIVE)

        response = client.post("/api/payments", json={"clip_id": str(clip.id), "amount": 10}, headers=creator_headers)

        assert response.status_code == 201

    def test_submitted_clip_cannot_be_paid(self, client, job, clipper, accepted_application, clip_factory, creator_headers):
        clip = clip_factory(job, clipper)

        response = client.post("/api/payments", json={"clip_id": str(clip.id), "amount": 10}, headers=creator_headers)

        assert response.status_code == 400

    def test_one_payment_per_clip(self, client, pending_payment, approved_clip, creator_headers):
        response = client.post(
            "/api/payments",
            json={"clip_id": str(approved_clip.id), "amount": 20},
            headers=creator_headers
        )

        assert response.status_code == 400
        assert "already exists" in response.json()["detail"]

    def test_non_owner_cannot_pay(self, client, approved_clip, clipper_headers):
        response = client.post("/api/payments", json={"clip_id": str(approved_clip.id), "amount": 20}, headers=clipper_headers)

        assert response.status_code == 403

    def test_unknown_clip(self, client, creator_headers):
        response = client.post("/api/payments", json={"clip_id": str(uuid.uuid4()), "amount": 20}, headers=creator_headers)

        assert response.status_code == 404

    @pytest.mark.parametrize("amount", [0, -5])
    def test_amount_must_be_positive(self, client, approved_clip, creator_headers, amount):
        response = client.post("/api/payments", json={"clip_id": str(approved_clip.id), "amount": amount}, headers=creator_headers)

        assert response.status_code == 422


class TestPaymentStatus:
    """PUT /payments/{id}/status"""

    def test_mark_paid_credits_clipper_and_clip(self, client, db_session, job, clipper, approved_clip, pending_payment, creator_headers):
        response = client.put(
            f"/api/payments/{pending_payment.id}/status",
            json={"status": "paid", "transaction_id": "txn_123"},
            headers=creator_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "paid"
        assert data["transaction_id"] == "txn_123"

        db_session.refresh(clipper)
        db_session.refresh(approved_clip)
        db_session.refresh(job)
        assert clipper.total_earnings == 50
        assert approved_clip.earnings == 50
        # max_clips is 2, only one paid so far
        assert job.status == JobStatus.ACTIVE

    def test_job_completes_when_paid_reaches_max_clips(self, client, db_session, job, creator, clipper, accepted_application, clip_factory, creator_headers):
        payment_ids = []
        for title in ("First", "Second"):
            clip = clip_factory(job, clipper, status=ClipStatus.APPROVED, title=title)
            created = client.post("/api/payments", json={"clip_id": str(clip.id), "amount": 30}, headers=creator_headers)
            payment_ids.append(created.json()["id"])

        client.put(f"/api/payments/{payment_ids[0]}/status", json={"status": "paid"}, headers=creator_headers)
        db_session.refresh(job)
        assert job.status == JobStatus.ACTIVE

        client.put(f"/api/payments/{payment_ids[1]}/status", json={"status": "paid"}, headers=creator_headers)
        db_session.refresh(job)
        db_session.refresh(clipper)
        assert job.status == JobStatus.COMPLETED
        assert clipper.total_earnings == 60

    def test_cancelled_job_stays_cancelled(self, client, db_session, job, pending_payment, creator_headers):
        job.max_clips = 1
        job.status = JobStatus.CANCELLED
        db_session.commit()

        response = client.put(f"/api/payments/{pending_payment.id}/status", json={"status": "paid"}, headers=creator_headers)

        assert response.status_code == 200
        db_session.refresh(job)
        assert job.status == JobStatus.CANCELLED

    def test_clipper_can_cancel(self, client, db_session, clipper, pending_payment, clipper_headers):
        response = client.put(f"/api/payments/{pending_payment.id}/status", json={"status": "cancelled"}, headers=clipper_headers)

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"
        db_session.refresh(clipper)
        assert clipper.total_earnings == 0

    def test_clipper_cannot_mark_paid(self, client, pending_payment, clipper_headers):
        response = client.put(f"/api/payments/{pending_payment.id}/status", json={"status": "paid"}, headers=clipper_headers)

        assert response.status_code == 403

    def test_outsider_gets_404(self, client, pending_payment, other_clipper_headers):
        response = client.put(f"/api/payments/{pending_payment.id}/status", json={"status": "cancelled"}, headers=other_clipper_headers)

        assert response.status_code == 404

    def test_only_pending_payments(self, client, db_session, pending_payment, creator_headers):
        pending_payment.status = PaymentStatus.CANCELLED
        db_session.commit()

        response = client.put(f"/api/payments/{pending_payment.id}/status", json={"status": "paid"}, headers=creator_headers)

        assert response.status_code == 400

    def test_invalid_target_status(self, client, pending_payment, creator_headers):
        response = client.put(f"/api/payments/{pending_payment.id}/status", json={"status": "pending"}, headers=creator_headers)

        assert response.status_code == 400


class TestPaymentSettlementAtomicity:
    """A failed commit while marking paid leaves every row untouched"""

    def test_commit_failure_rolls_back_everything(self, client, db_session, job, clipper, approved_clip, pending_payment, creator_headers, failing_commit):
        response = client.put(
            f"/api/payments/{pending_payment.id}/status",
            json={"status": "paid", "transaction_id": "txn_lost"},
            headers=creator_headers
        )

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to update payment"

        for row in (pending_payment, clipper, approved_clip, job):
            db_session.refresh(row)
        assert pending_payment.status == PaymentStatus.PENDING
        assert pending_payment.transaction_id is None
        assert clipper.total_earnings == 0
        assert approved_clip.earnings == 0
        assert job.status == JobStatus.ACTIVE

    def test_commit_failure_does_not_complete_job(self, client, db_session, job, pending_payment, creator_headers, request):
        job.max_clips = 1
        db_session.commit()
        request.getfixturevalue("failing_commit")

        response = client.put(f"/api/payments/{pending_payment.id}/status", json={"status": "paid"}, headers=creator_headers)

        assert response.status_code == 500
        db_session.refresh(job)
        assert job.status == JobStatus.ACTIVE


class TestEarningsCounter:
    """total_earnings is incremented in SQL, never from a cached value"""

    def test_mark_paid_adds_to_current_total(self, db_session, clipper, pending_payment):
        # Load the counter, then let another writer change the row behind the session's back
        assert clipper.total_earnings == 0
        db_session.query(User).filter(User.id == clipper.id).update(
            {User.total_earnings: 25}, synchronize_session=False
        )

        payment_crud.mark_paid(db_session, pending_payment)

        db_session.refresh(clipper)
        assert clipper.total_earnings == 75

    def test_successive_payments_accumulate(self, client, db_session, job, clipper, accepted_application, clip_factory, creator_headers):
        for title, amount in (("First", 20), ("Second", 15)):
            clip = clip_factory(job, clipper, status=ClipStatus.APPROVED, title=title)
            created = client.post("/api/payments", json={"clip_id": str(clip.id), "amount": amount}, headers=creator_headers)
            client.put(f"/api/payments/{created.json()['id']}/status", json={"status": "paid"}, headers=creator_headers)

        db_session.refresh(clipper)
        assert clipper.total_earnings == 35


class TestPaymentHistory:
    """GET /payments/history"""

    def test_creator_sees_outgoing(self, client, pending_payment, creator_headers):
        response = client.get("/api/payments/history", headers=creator_headers)

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["payment_type"] == "outgoing"
        assert data[0]["other_party"] == "clipper"
        assert data[0]["job_title"] == "Stream clips"

    def test_clipper_sees_incoming(self, client, pending_payment, clipper_headers):
        response = client.get("/api/payments/history", headers=clipper_headers)

        data = response.json()
        assert data[0]["payment_type"] == "incoming"
        assert data[0]["other_party"] == "creator"

    def test_status_filter(self, client, pending_payment, creator_headers):
        assert client.get("/api/payments/history?status=paid", headers=creator_headers).json() == []
        assert len(client.get("/api/payments/history?status=pending", headers=creator_headers).json()) == 1

    def test_outsider_sees_nothing(self, client, pending_payment, other_clipper_headers):
        assert client.get("/api/payments/history", headers=other_clipper_headers).json() == []


class TestPaymentStats:
    """GET /payments/stats"""

    def test_creator_stats(self, client, pending_payment, creator_headers):
        client.put(f"/api/payments/{pending_payment.id}/status", json={"status": "paid"}, headers=creator_headers)

        response = client.get("/api/payments/stats", headers=creator_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["role"] == "creator"
        assert data["total_payments"] == 1
        assert data["total_paid"] == 50
        assert data["paid_count"] == 1
        assert data["pending_amount"] == 0

    def test_clipper_stats(self, client, pending_payment, clipper_headers):
        response = client.get("/api/payments/stats", headers=clipper_headers)

        data = response.json()
        assert data["role"] == "clipper"
        assert data["total_earned"] == 0
        assert data["pending_earnings"] == 50
        assert data["pending_count"] == 1

    def test_empty_stats(self, client, other_clipper_headers):
        data = client.get("/api/payments/stats", headers=other_clipper_headers).json()

        assert data["total_payments"] == 0
        assert data["total_earned"] == 0
