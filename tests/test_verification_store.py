from api.services.verification_store import CodePurpose, VerificationCodeStore, generate_code


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_generate_code_is_six_digits() -> None:
    for _ in range(50):
        code = generate_code()
        assert len(code) == 6
        assert code.isdigit()


def test_code_is_single_use() -> None:
    store = VerificationCodeStore(ttl_seconds=60)
    code = store.issue(CodePurpose.VERIFY_EMAIL, "Jane@Example.com")
    assert store.verify(CodePurpose.VERIFY_EMAIL, "jane@example.com", code)
    assert not store.verify(CodePurpose.VERIFY_EMAIL, "jane@example.com", code)


def test_wrong_code_keeps_entry() -> None:
    store = VerificationCodeStore(ttl_seconds=60)
    code = store.issue(CodePurpose.VERIFY_EMAIL, "jane@example.com")
    wrong = "000000" if code != "000000" else "111111"
    assert not store.verify(CodePurpose.VERIFY_EMAIL, "jane@example.com", wrong)
    assert len(store) == 1
    assert store.verify(CodePurpose.VERIFY_EMAIL, "jane@example.com", code)


def test_expired_code_is_rejected_and_removed() -> None:
    clock = FakeClock()
    store = VerificationCodeStore(ttl_seconds=60, clock=clock)
    code = store.issue(CodePurpose.VERIFY_EMAIL, "jane@example.com")
    clock.now += 61
    assert not store.verify(CodePurpose.VERIFY_EMAIL, "jane@example.com", code)
    assert len(store) == 0


def test_purposes_and_users_are_separate() -> None:
    store = VerificationCodeStore(ttl_seconds=60)
    code = store.issue(CodePurpose.CHANGE_EMAIL, "new@example.com", user_id=1)
    assert not store.verify(CodePurpose.VERIFY_EMAIL, "new@example.com", code)
    assert not store.verify(CodePurpose.CHANGE_EMAIL, "new@example.com", code, user_id=2)
    assert store.verify(CodePurpose.CHANGE_EMAIL, "new@example.com", code, user_id=1)


def test_reissue_replaces_previous_code() -> None:
    store = VerificationCodeStore(ttl_seconds=60)
    first = store.issue(CodePurpose.VERIFY_EMAIL, "jane@example.com")
    second = store.issue(CodePurpose.VERIFY_EMAIL, "jane@example.com")
    assert len(store) == 1
    if first != second:
        assert not store.verify(CodePurpose.VERIFY_EMAIL, "jane@example.com", first)
    assert store.verify(CodePurpose.VERIFY_EMAIL, "jane@example.com", second)


def test_purge_expired() -> None:
    clock = FakeClock()
    store = VerificationCodeStore(ttl_seconds=60, clock=clock)
    store.issue(CodePurpose.VERIFY_EMAIL, "old@example.com")
    clock.now += 30
    store.issue(CodePurpose.VERIFY_EMAIL, "new@example.com")
    clock.now += 31
    assert store.purge_expired() == 1
    assert len(store) == 1
