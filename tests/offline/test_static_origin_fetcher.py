import tempfile
import unittest
from pathlib import Path

from offline import FetchError, ProxyRequest, StaticOriginFetcher
from offline.static_files import guess_content_type, resolve_static_file

ORIGIN = "http://127.0.0.1:8765"


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


class StaticFilesTests(unittest.TestCase):
    def test_resolve_static_file_returns_file_inside_web_root(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            web_root = Path(temp_dir)
            script = web_root / "script.js"
            _write(script, "console.log('ok');")

            self.assertEqual(script.resolve(), resolve_static_file(web_root, "/script.js"))

    def test_resolve_static_file_maps_root_to_index(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            web_root = Path(temp_dir)
            index = web_root / "index.html"
            _write(index, "<html></html>")

            self.assertEqual(index.resolve(), resolve_static_file(web_root, "/"))
            self.assertEqual(index.resolve(), resolve_static_file(web_root, ""))

    def test_resolve_static_file_rejects_path_traversal(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            web_root = root / "web"
            web_root.mkdir(parents=True, exist_ok=True)
            _write(root / "secret.txt", "x")

            self.assertIsNone(resolve_static_file(web_root, "/../secret.txt"))

    def test_resolve_static_file_rejects_missing_file(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            self.assertIsNone(resolve_static_file(Path(temp_dir), "/missing.txt"))

    def test_guess_content_type_sets_charset_for_text(self) -> None:
        self.assertEqual("text/html; charset=utf-8", guess_content_type(Path("index.html")))
        self.assertEqual(
            "application/javascript; charset=utf-8",
            guess_content_type(Path("script.js")),
        )
        self.assertEqual(
            "image/svg+xml; charset=utf-8",
            guess_content_type(Path("icons/icon.svg")),
        )
        self.assertEqual("image/png", guess_content_type(Path("icons/icon-192x192.png")))

    def test_guess_content_type_falls_back_for_unknown_extensions(self) -> None:
        self.assertEqual(
            "application/octet-stream",
            guess_content_type(Path("blob.unknownbinaryextension")),
        )


class StaticOriginFetcherTests(unittest.TestCase):
    def test_fetch_serves_file_as_basic_response(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            web_root = Path(temp_dir)
            _write(web_root / "index.html", "<html>timer</html>")
            fetcher = StaticOriginFetcher(web_root, origin=ORIGIN)

            response = fetcher.fetch(ProxyRequest(f"{ORIGIN}/"))

            self.assertEqual(200, response.status)
            self.assertEqual("basic", response.type)
            self.assertEqual(b"<html>timer</html>", response.body)
            self.assertEqual("text/html; charset=utf-8", response.content_type)

    def test_fetch_honours_path_prefix(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            web_root = Path(temp_dir)
            _write(web_root / "script.js", "run();")
            fetcher = StaticOriginFetcher(web_root, origin=ORIGIN, path_prefix="/pomo")

            served = fetcher.fetch(ProxyRequest(f"{ORIGIN}/pomo/script.js"))
            outside = fetcher.fetch(ProxyRequest(f"{ORIGIN}/script.js"))

            self.assertEqual(200, served.status)
            self.assertEqual(404, outside.status)

    def test_fetch_missing_file_is_not_found(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            fetcher = StaticOriginFetcher(Path(temp_dir), origin=ORIGIN)
            response = fetcher.fetch(ProxyRequest(f"{ORIGIN}/audio.wav"))
            self.assertEqual(404, response.status)
            self.assertFalse(response.ok)

    def test_fetch_rejects_other_origins(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            fetcher = StaticOriginFetcher(Path(temp_dir), origin=ORIGIN)
            with self.assertRaises(FetchError):
                fetcher.fetch(ProxyRequest("https://cdn.example.com/app.js"))


if __name__ == "__main__":
    unittest.main()
