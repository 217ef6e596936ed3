import unittest

from fastapi.testclient import TestClient

from fakes import FakeTranslator, v1
from server.app import app, get_translator_factory


class TestServer(unittest.TestCase):
    def setUp(self):
        self.fake = FakeTranslator({"Hello": "Bonjour"})
        self.requested = []

        def factory(provider):
            self.requested.append(provider)
            return self.fake

        app.dependency_overrides[get_translator_factory] = lambda: factory
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def post(self, content, **form):
        data = {"source_lang": "en", "target_lang": "fr", "rate": "0"}
        data.update(form)
        files = {"file": ("messages.xlf", content.encode("utf-8"), "application/xml")}
        return self.client.post("/api/translate", data=data, files=files)

    def test_health(self):
        response = self.client.get("/api/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})

    def test_translate_upload(self):
        response = self.post(v1('<trans-unit id="1"><source>Hello</source></trans-unit>'),
                             clear_state="true", provider="mock")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers["X-Translated-Count"], "1")
        self.assertEqual(response.headers["X-Failed-Count"], "0")
        self.assertIn("translated_messages.xlf", response.headers["Content-Disposition"])
        self.assertIn(b'<target state="translated">Bonjour</target>', response.content)
        self.assertEqual(self.requested, ["mock"])

    def test_skip_needs_no_translator(self):
        response = self.post(v1('<trans-unit id="1"><source>Hello</source></trans-unit>'), skip="true")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.requested, [])
        self.assertEqual(self.fake.calls, [])

    def test_malformed_upload(self):
        response = self.post("<xliff><file>")
        self.assertEqual(response.status_code, 400)

    def test_invalid_concurrency(self):
        response = self.post(v1(), concurrent="0")
        self.assertEqual(response.status_code, 422)

    def test_unknown_provider(self):
        response = self.post(v1(), provider="babelfish")
        self.assertEqual(response.status_code, 422)


if __name__ == "__main__":
    unittest.main()
