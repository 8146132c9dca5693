from __future__ import annotations

import unittest
import warnings
from unittest import mock

from fastapi.testclient import TestClient

from bfoc.server import TranslationStore, create_app, serve
from bfoc.server.__main__ import main as server_main


class TranslationApiTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = TranslationStore()
        self.client = TestClient(create_app(self.store))

    def _create(self, *, code: str = "+.", **payload):
        body = {"code": code}
        body.update(payload)
        response = self.client.post("/api/translations", json=body)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()

    def test_create_translation_to_c(self) -> None:
        data = self._create(code="++[->+<]", timestamp=False)
        self.assertIn("translation_id", data)
        self.assertEqual(data["target"], "c")
        self.assertEqual(data["source"], "++[->+<]")
        self.assertIn("while (tape[ptr]) {", data["output"])
        self.assertNotIn("generated on", data["output"])
        self.assertEqual(data["summary"]["loop_count"], 1)
        self.assertEqual(data["summary"]["instruction_count"], 7)
        first = data["instructions"][0]
        self.assertEqual(first["op"], "Add")
        self.assertEqual(first["count"], 2)
        self.assertEqual(first["position"], 0)
        self.assertIsNone(first["id"])
        self.assertEqual(data["instructions"][1]["id"], 0)

    def test_create_translation_to_brainfuck(self) -> None:
        data = self._create(code="+ + fused . ", target="Brainfuck")
        self.assertEqual(data["target"], "brainfuck")
        self.assertEqual(data["output"], "++.")

    def test_tape_length_is_passed_to_backend(self) -> None:
        data = self._create(code="", tape_length=16)
        self.assertIn("static uint8_t tape[16];", data["output"])
        self.assertEqual(data["instructions"], [])

    def test_unknown_target_is_rejected(self) -> None:
        response = self.client.post("/api/translations", json={"code": "+", "target": "rust"})
        self.assertEqual(response.status_code, 422, response.text)

    def test_invalid_tape_length_is_rejected(self) -> None:
        response = self.client.post("/api/translations", json={"code": "+", "tape_length": 0})
        self.assertEqual(response.status_code, 422, response.text)

    def test_unmatched_close_returns_position(self) -> None:
        response = self.client.post("/api/translations", json={"code": "+]"})
        self.assertEqual(response.status_code, 422, response.text)
        detail = response.json()["detail"]
        self.assertEqual(detail["kind"], "UnmatchedLoopClose")
        self.assertEqual(detail["position"], 1)
        self.assertEqual(self.store.list_ids(), [])

    def test_unmatched_open_returns_position(self) -> None:
        response = self.client.post("/api/translations", json={"code": "[["})
        self.assertEqual(response.status_code, 422, response.text)
        detail = response.json()["detail"]
        self.assertEqual(detail["kind"], "UnmatchedLoopOpen")
        self.assertEqual(detail["position"], 1)

    def test_translation_error_response_emits_no_warnings(self) -> None:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            response = self.client.post("/api/translations", json={"code": "]"})
        self.assertEqual(response.status_code, 422, response.text)
        self.assertEqual(
            [str(item.message) for item in caught if "HTTP_422" in str(item.message)],
            [],
        )

    def test_get_and_list_translation(self) -> None:
        data = self._create(code=",.")
        translation_id = data["translation_id"]

        response = self.client.get(f"/api/translations/{translation_id}")
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(response.json(), data)

        listed = self.client.get("/api/translations")
        self.assertEqual(listed.status_code, 200)
        self.assertEqual(listed.json(), [translation_id])

    def test_unknown_translation_returns_404(self) -> None:
        response = self.client.get("/api/translations/does-not-exist")
        self.assertEqual(response.status_code, 404)

    def test_delete_translation(self) -> None:
        data = self._create()
        translation_id = data["translation_id"]

        removed = self.client.delete(f"/api/translations/{translation_id}")
        self.assertEqual(removed.status_code, 204)

        again = self.client.delete(f"/api/translations/{translation_id}")
        self.assertEqual(again.status_code, 404)
        self.assertEqual(self.client.get(f"/api/translations/{translation_id}").status_code, 404)


class ServeTests(unittest.TestCase):
    def test_serve_runs_app_instance(self) -> None:
        with mock.patch("uvicorn.run") as run:
            serve("0.0.0.0", 9000)
        run.assert_called_once()
        app = run.call_args.args[0]
        self.assertEqual(app.title, "bfoc translation API")
        self.assertEqual(run.call_args.kwargs, {"host": "0.0.0.0", "port": 9000})

    def test_reload_uses_factory_import_string(self) -> None:
        with mock.patch("uvicorn.run") as run:
            status = server_main(["--port", "8123", "--reload"])
        self.assertEqual(status, 0)
        run.assert_called_once_with(
            "bfoc.server.app:create_app",
            factory=True,
            host="127.0.0.1",
            port=8123,
            reload=True,
        )


if __name__ == "__main__":
    unittest.main()
