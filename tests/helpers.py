"""Helpers de los tests de API: login, refresh con cookie explícita y lectura del OTP."""
import os
import re
import threading
from typing import Dict, List, Tuple

from fastapi.testclient import TestClient

ADMIN_EMAIL = os.environ["ADMIN_EMAIL"]
ADMIN_PASSWORD = os.environ["ADMIN_PASSWORD"]


def code_from(mail: Dict[str, str]) -> str:
    m = re.search(r">(\d{6})<", mail["html"])
    assert m, "el correo no contiene un código"
    return m.group(1)


def refresh_with(client: TestClient, path: str, token: str):
    """POST de refresh presentando exactamente `token` como cookie."""
    client.cookies.clear()
    return client.post(path, headers={"Cookie": f"rt={token}"})


def bearer(access: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {access}"}


def admin_login(client: TestClient):
    client.cookies.clear()
    return client.post("/api/admin/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})


def user_login(client: TestClient, outbox, email: str = "u1@example.com"):
    client.cookies.clear()
    r = client.post("/api/auth/otp/request", json={"email": email})
    assert r.status_code == 200, r.text
    code = code_from(outbox[-1])
    return client.post("/api/auth/otp/verify", json={"email": email, "code": code})


def run_concurrently(fn, n: int = 8) -> List[Tuple[str, object]]:
    """Ejecuta `fn` en `n` hilos liberados a la vez; devuelve ("ok", valor) o ("err", excepción)."""
    barrier = threading.Barrier(n)
    results: List[Tuple[str, object]] = []
    results_lock = threading.Lock()

    def _worker():
        barrier.wait()
        try:
            out = ("ok", fn())
        except Exception as exc:
            out = ("err", exc)
        with results_lock:
            results.append(out)

    threads = [threading.Thread(target=_worker) for _ in range(n)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)
    return results
