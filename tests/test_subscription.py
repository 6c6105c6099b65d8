from leads_dashboard.core.subscription import VisibilitySubscription


def test_fires_once_until_rearmed():
    calls = []
    subscription = VisibilitySubscription()
    subscription.observe(lambda: calls.append("hit"))

    assert subscription.notify(False) is False
    assert subscription.notify(True) is True
    assert subscription.notify(True) is False
    assert calls == ["hit"]

    subscription.rearm()
    assert subscription.armed
    assert subscription.notify(True) is True
    assert calls == ["hit", "hit"]


def test_disconnect_stops_notifications():
    calls = []
    subscription = VisibilitySubscription()
    subscription.observe(lambda: calls.append("hit"))
    subscription.disconnect()
    subscription.rearm()

    assert not subscription.armed
    assert subscription.notify(True) is False
    assert calls == []
