from app.services.cache_service import MemoryCache
from app.services.otp_service import OtpService, OtpPurpose


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def make_service(length=6, expiry_minutes=10):
    clock = FakeClock()
    return OtpService(MemoryCache(clock), length, expiry_minutes), clock


def test_cache_entry_expires():
    clock = FakeClock()
    store = MemoryCache(clock)
    store.set("key", "value", ttl=60)

    assert store.get("key") == "value"
    clock.now += 61
    assert store.get("key") is None
    assert "key" not in store


def test_cache_default_ttl_is_one_hour():
    clock = FakeClock()
    store = MemoryCache(clock)
    store.set("key", "value")

    clock.now += 3599
    assert store.get("key") == "value"
    clock.now += 2
    assert store.get("key", "gone") == "gone"


def test_expired_entries_are_purged_on_write():
    clock = FakeClock()
    store = MemoryCache(clock)
    for n in range(1000):
        store.set(f"otp:{n}", "123456", ttl=60)
    assert len(store) == 1000

    clock.now = 10000
    store.set("fresh", "value", ttl=60)

    assert len(store) == 1
    assert store.get("fresh") == "value"


def test_generated_code_is_numeric_and_sized():
    service, _ = make_service(length=6)
    code = service.generate("user-1", OtpPurpose.TWO_FACTOR)

    assert len(code) == 6
    assert code.isdigit()


def test_code_is_single_use():
    service, _ = make_service()
    code = service.generate("user-1", OtpPurpose.EMAIL_VERIFY)

    assert service.verify("user-1", OtpPurpose.EMAIL_VERIFY, code) is True
    assert service.verify("user-1", OtpPurpose.EMAIL_VERIFY, code) is False


def test_code_is_bound_to_user_and_purpose():
    service, _ = make_service()
    code = service.generate("user-1", OtpPurpose.PASSWORD_RESET)

    assert service.verify("user-2", OtpPurpose.PASSWORD_RESET, code) is False
    assert service.verify("user-1", OtpPurpose.TWO_FACTOR, code) is False
    assert service.verify("user-1", OtpPurpose.PASSWORD_RESET, code) is True


def test_wrong_code_does_not_consume_the_real_one():
    service, _ = make_service()
    code = service.generate("user-1", OtpPurpose.TWO_FACTOR)
    wrong = "000000" if code != "000000" else "111111"

    assert service.verify("user-1", OtpPurpose.TWO_FACTOR, wrong) is False
    assert service.verify("user-1", OtpPurpose.TWO_FACTOR, code) is True


def test_expired_code_is_rejected():
    service, clock = make_service(expiry_minutes=10)
    code = service.generate("user-1", OtpPurpose.TWO_FACTOR)

    clock.now += 10 * 60 + 1
    assert service.verify("user-1", OtpPurpose.TWO_FACTOR, code) is False


def test_new_code_replaces_previous():
    service, _ = make_service()
    first = service.generate("user-1", OtpPurpose.TWO_FACTOR)
    second = service.generate("user-1", OtpPurpose.TWO_FACTOR)

    if first != second:
        assert service.verify("user-1", OtpPurpose.TWO_FACTOR, first) is False
    assert service.verify("user-1", OtpPurpose.TWO_FACTOR, second) is True


def test_blank_or_malformed_code_is_rejected():
    service, _ = make_service()
    service.generate("user-1", OtpPurpose.TWO_FACTOR)

    assert service.verify("user-1", OtpPurpose.TWO_FACTOR, "") is False
    assert service.verify("user-1", OtpPurpose.TWO_FACTOR, None) is False
    assert service.verify("user-1", OtpPurpose.TWO_FACTOR, "12") is False
