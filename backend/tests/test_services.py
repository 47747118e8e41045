"""Tests for the collaborators built on the store."""

import pytest

from config import reset_settings_cache
from repositories import Collection, NotFoundError
from services import analytics, auth, chat, email, knowledge, llm, payments, voice
from services.dashboard import get_dashboard_snapshot
from services.errors import AuthError, FeatureDisabledError, PaymentsError


@pytest.fixture(autouse=True)
def clean_usage():
    llm.reset_usage()
    yield
    llm.reset_usage()


def _disable(monkeypatch, flags):
    monkeypatch.setenv("FEATURE_FLAGS", flags)
    reset_settings_cache()


# ── auth ───────────────────────────────────────────────────────────────

def test_hash_and_verify_password():
    stored = auth.hash_password("s3cret")
    salt, digest = stored.split(":")
    assert len(salt) == 32
    assert len(digest) == 64
    assert auth.verify_password("s3cret", stored)
    assert not auth.verify_password("wrong", stored)
    assert not auth.verify_password("s3cret", None)
    assert not auth.verify_password("s3cret", "garbage")


def test_ensure_demo_user_is_idempotent(db):
    first = auth.ensure_demo_user(db)
    second = auth.ensure_demo_user(db)
    assert first["id"] == second["id"]
    assert first["role"] == "admin"
    assert len(db.get_users()) == 1


def test_ensure_demo_user_adds_missing_password(db):
    existing = db.upsert_user({"email": "founder@example.com", "name": "Founder", "role": "user"})
    patched = auth.ensure_demo_user(db)
    assert patched["id"] == existing["id"]
    assert auth.verify_password(auth.DEMO_PASSWORD, patched["passwordHash"])


def test_authenticate_and_session_lookup(db):
    auth.ensure_demo_user(db)
    user, session = auth.authenticate("founder@example.com", auth.DEMO_PASSWORD, db)
    assert auth.get_current_user(session.token, db)["id"] == user["id"]

    auth.sign_out(session.token)
    assert auth.get_session(session.token) is None
    assert auth.get_current_user(session.token, db) is None


def test_authenticate_rejects_bad_password(db):
    auth.ensure_demo_user(db)
    with pytest.raises(AuthError):
        auth.authenticate("founder@example.com", "nope", db)
    with pytest.raises(AuthError):
        auth.authenticate("ghost@example.com", "nope", db)


# ── chat ───────────────────────────────────────────────────────────────

def test_send_chat_message_appends_both_sides(db):
    thread = chat.create_thread("Support", "usr_1", db)
    result = chat.send_chat_message(thread["id"], "How do refunds work? Please explain.", db)

    messages = db.get_messages(thread["id"])
    assert [m["role"] for m in messages] == ["user", "assistant"]
    assert result["userMessage"]["content"] == "How do refunds work? Please explain."
    assert result["assistantMessage"]["content"].startswith("Here is what I understood:")
    assert result["tokensUsed"] > 0
    assert llm.get_usage_statistics()["totalSessions"] == 1


def test_send_chat_message_unknown_thread(db):
    with pytest.raises(NotFoundError):
        chat.send_chat_message("thr_missing", "hi", db)
    assert db.get_messages() == []


def test_get_recent_messages_limits_tail(db):
    for i in range(5):
        db.add_message({"threadId": "t1", "role": "user", "content": str(i)})
    assert [m["content"] for m in chat.get_recent_messages("t1", 2, db)] == ["3", "4"]


def test_chat_disabled(db, monkeypatch):
    _disable(monkeypatch, "chat=false")
    with pytest.raises(FeatureDisabledError):
        chat.create_thread("x", "usr_1", db)


# ── payments ───────────────────────────────────────────────────────────

def test_pricing_table_formats_prices(db):
    db.upsert_product({"name": "Pro", "description": "", "priceCents": 9900, "interval": "month"})
    table = payments.get_pricing_table(db)
    assert table[0]["formattedPrice"] == "$99.00/month"


def test_subscription_for_user(db):
    product = db.upsert_product({"name": "Pro", "priceCents": 9900, "interval": "month"})
    db.upsert_subscription({"userId": "usr_1", "productId": product["id"], "status": "active"})

    found = payments.get_subscription_for_user("usr_1", db)
    assert found["product"]["id"] == product["id"]
    assert found["subscription"]["status"] == "active"
    assert payments.get_subscription_for_user("usr_2", db) is None


def test_subscription_upsert_keeps_one_per_user(db):
    db.upsert_subscription({"userId": "usr_1", "productId": "prd_a", "status": "trialing"})
    db.upsert_subscription({"userId": "usr_1", "productId": "prd_b", "status": "active"})
    subs = db.get_subscriptions()
    assert len(subs) == 1
    assert subs[0]["productId"] == "prd_b"


def test_checkout_session(db):
    product = db.upsert_product({"name": "Starter", "priceCents": 2900, "interval": "month"})
    checkout = payments.create_checkout_session(product["id"], db)
    assert checkout["url"].endswith(checkout["id"])
    with pytest.raises(PaymentsError):
        payments.create_checkout_session("prd_missing", db)


def test_customer_portal_url_escapes_user_id():
    assert payments.get_customer_portal_url("usr a/b").endswith("user=usr%20a%2Fb")


# ── analytics / voice / email ──────────────────────────────────────────

def test_analytics_most_recent_first(db):
    for i in range(12):
        analytics.track_event(f"e{i}", {"i": i}, db=db)
    recent = analytics.list_analytics_events(db=db)
    assert len(recent) == 10
    assert recent[0]["name"] == "e11"
    assert recent[-1]["name"] == "e2"
    assert len(db.get_analytics_events()) == 12


def test_transcribe_audio_records_session(db):
    session = voice.transcribe_audio(b"x" * 800, db)
    assert session["durationSeconds"] == 10
    assert session["transcript"] == "Transcribed 800 bytes of audio into text."
    assert voice.list_voice_sessions(db)[0]["id"] == session["id"]


def test_voice_disabled(db, monkeypatch):
    _disable(monkeypatch, '{"voice": false}')
    with pytest.raises(FeatureDisabledError):
        voice.transcribe_audio(b"abc", db)
    assert db.get_voice_sessions() == []


def test_send_email_writes_audit_log(db):
    sent = email.send_transactional_email("a@example.com", "welcome-email", {"plan": "Pro"}, db)
    logs = db.get_audit_logs()
    assert len(logs) == 1
    assert logs[0]["action"] == "email.sent"
    assert logs[0]["target"] == "welcome-email"
    assert logs[0]["metadata"] == {"plan": "Pro"}
    assert sent["previewUrl"] == "https://email.preview/welcome-email"


# ── knowledge ──────────────────────────────────────────────────────────

def test_ingest_directory_upserts_by_slug(db, tmp_path):
    docs = tmp_path / "docs"
    (docs / "guides").mkdir(parents=True)
    (docs / "intro.md").write_text("# Welcome\n\nFirst paragraph.", encoding="utf-8")
    (docs / "guides" / "Setup.mdx").write_text("No heading here.", encoding="utf-8")
    (docs / "notes.txt").write_text("ignored", encoding="utf-8")

    slugs = knowledge.ingest_directory(docs, root=tmp_path, db=db)
    assert slugs == ["docs:guides:setup", "docs:intro"]

    by_slug = {d["slug"]: d for d in db.get_knowledge_base()}
    assert by_slug["docs:intro"]["title"] == "Welcome"
    assert by_slug["docs:guides:setup"]["title"] == "setup"
    assert len(by_slug["docs:intro"]["embedding"]) == knowledge.EMBEDDING_DIM

    first_id = by_slug["docs:intro"]["id"]
    (docs / "intro.md").write_text("# Welcome back\n\nChanged.", encoding="utf-8")
    knowledge.ingest_directory(docs, root=tmp_path, db=db)
    docs_after = db.get_knowledge_base()
    assert len(docs_after) == 2
    intro = next(d for d in docs_after if d["slug"] == "docs:intro")
    assert intro["id"] == first_id
    assert intro["title"] == "Welcome back"


def test_ingest_dry_run_writes_nothing(db, db_path, tmp_path):
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "a.md").write_text("# A", encoding="utf-8")
    assert knowledge.ingest_directory(docs, dry_run=True, root=tmp_path, db=db) == ["docs:a"]
    assert db.get_knowledge_base() == []
    assert not db_path.exists()


def test_ingest_missing_directory(db, tmp_path):
    with pytest.raises(FileNotFoundError):
        knowledge.ingest_directory(tmp_path / "missing", db=db)


def test_pseudo_embedding_is_deterministic():
    assert knowledge.pseudo_embedding("abc", dim=8) == knowledge.pseudo_embedding("abc", dim=8)
    assert knowledge.pseudo_embedding("", dim=4) == [0.0, 0.0, 0.0, 0.0]


# ── dashboard ──────────────────────────────────────────────────────────

def test_dashboard_snapshot(db):
    user = auth.ensure_demo_user(db)
    product = db.upsert_product({"name": "Pro", "description": "d", "priceCents": 9900, "interval": "month"})
    db.upsert_subscription({
        "userId": user["id"], "productId": product["id"], "status": "active",
        "currentPeriodEnd": "2026-11-16T00:00:00.000Z",
    })
    thread = db.upsert_thread({"title": "Welcome", "ownerId": user["id"]})
    db.add_message({"threadId": thread["id"], "role": "user", "content": "abcd"})

    snapshot = get_dashboard_snapshot(db)
    assert snapshot["profile"]["email"] == "founder@example.com"
    assert snapshot["subscription"] == {
        "productName": "Pro", "status": "active", "renewalDate": "2026-11-16",
    }
    assert snapshot["products"][0]["price"] == "$99.00"
    assert snapshot["chatThreads"][0]["messageCount"] == 1
    assert snapshot["chatThreads"][0]["avgMessageLength"] == 4
    assert snapshot["featureFlags"]["chat"] is True


def test_dashboard_on_empty_store(db):
    snapshot = get_dashboard_snapshot(db)
    assert snapshot["profile"]["name"] == "Demo User"
    assert snapshot["subscription"] is None
    assert snapshot["chatThreads"] == []


def test_create_thread_without_owner_keeps_existing_owner(db):
    first = chat.create_thread("Support", "usr_1", db)
    again = chat.create_thread("Support", db=db)

    assert again["id"] == first["id"]
    assert again["ownerId"] == "usr_1"
    assert len(db.get_threads()) == 1
