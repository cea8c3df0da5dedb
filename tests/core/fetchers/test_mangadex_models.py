import unittest

from manga_archiver.core.fetchers.mangadex_models import (
    ApiChapter,
    ApiChapterDetail,
    ApiSeries,
    unwrap,
)


class TestMangadexModels(unittest.TestCase):

    def test_unwrap_requires_envelope(self):
        self.assertEqual(unwrap({"code": 200, "status": "OK", "data": {"id": 1}}), {"id": 1})
        with self.assertRaises(KeyError):
            unwrap({"code": 200, "data": {}})
        with self.assertRaises(TypeError):
            unwrap([])

    def test_null_strings_are_rejected(self):
        with self.assertRaises(TypeError):
            ApiSeries.from_dict({"id": 1, "title": None})
        with self.assertRaises(TypeError):
            ApiChapter.from_dict({
                "id": 1, "volume": None, "chapter": "1", "language": "gb",
                "groups": [1], "timestamp": 0,
            })

    def test_empty_volume_is_kept_as_written(self):
        chapter = ApiChapter.from_dict({
            "id": 1, "volume": "", "chapter": "1", "language": "gb",
            "groups": [1], "timestamp": 0,
        })
        self.assertEqual(chapter.volume, "")

    def test_optional_fallback_server(self):
        detail = ApiChapterDetail.from_dict({
            "id": 1, "hash": "abc", "pages": ["1.png"],
            "server": "https://s2.mangadex.org/data/", "serverFallback": None,
        })
        self.assertIsNone(detail.server_fallback)

        with self.assertRaises(TypeError):
            ApiChapterDetail.from_dict({
                "id": 1, "hash": "abc", "pages": [None],
                "server": "https://s2.mangadex.org/data/",
            })


if __name__ == '__main__':
    unittest.main()
