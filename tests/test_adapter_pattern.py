import unittest
from typing import Protocol
from unittest.mock import MagicMock

from wirebox import Container, Lifetime


class Notifier(Protocol):
    def notify(self, user_id: int, text: str) -> None: ...


class AuditTrail(Protocol):
    def record(self, event: str) -> None: ...


class MemoryAudit:
    def __init__(self) -> None:
        self.events: list[str] = []

    def record(self, event: str) -> None:
        self.events.append(event)


class SmsGateway:
    """Vendor client with its own call shape."""

    def send_sms(self, phone: str, body: str) -> str:
        return f"queued:{phone}"


class SmsNotifier:
    def __init__(self, gateway: SmsGateway, audit: AuditTrail, country_code: str = "+1") -> None:
        self._gateway = gateway
        self._audit = audit
        self._country_code = country_code

    def notify(self, user_id: int, text: str) -> None:
        receipt = self._gateway.send_sms(f"{self._country_code}{user_id}", body=text)
        self._audit.record(receipt)


class SignupHandler:
    def __init__(self, notifier: Notifier) -> None:
        self.notifier = notifier

    def handle(self, user_id: int) -> int:
        self.notifier.notify(user_id, "welcome")
        return user_id


class TestRegisteredCollaborators(unittest.TestCase):
    cont: Container

    def setUp(self):
        self.cont = Container()
        self.gateway = MagicMock(spec=SmsGateway)
        self.gateway.send_sms.return_value = "queued"
        self.cont.set(SmsGateway, self.gateway)
        self.audit = MemoryAudit()
        self.cont.set(AuditTrail, self.audit)

    def test_make_adapter_with_hint(self):
        notifier = self.cont.make(SmsNotifier, {"country_code": "+44"})
        notifier.notify(7700, "hello")

        self.gateway.send_sms.assert_called_once_with("+447700", body="hello")
        assert self.audit.events == ["queued"]

    def test_call_handler_method_with_bound_protocol(self):
        self.cont.bind(Notifier, SmsNotifier, lifetime=Lifetime.TRANSIENT)

        result = self.cont.call((self.cont.make(SignupHandler), "handle"), {"user_id": 42})

        assert result == 42
        self.gateway.send_sms.assert_called_once_with("+142", body="welcome")


class TestAutoWiredCollaborators(unittest.TestCase):
    cont: Container

    def setUp(self):
        self.cont = Container()
        self.cont.bind(Notifier, SmsNotifier)
        self.cont.bind(AuditTrail, MemoryAudit)

    def test_protocol_binding_builds_adapter_once(self):
        notifier = self.cont.get(Notifier)

        assert isinstance(notifier, SmsNotifier)
        assert isinstance(notifier._gateway, SmsGateway)  # noqa: SLF001
        assert self.cont.get(Notifier) is notifier

    def test_shared_audit_trail(self):
        self.cont.get(Notifier).notify(1, "hi")
        assert self.cont.get(AuditTrail).events == ["queued:+11"]
