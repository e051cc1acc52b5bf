import json
import unittest
from datetime import date

from cspf.models import Playlist, PlaylistTypeError, Track, TrackTypeError


def _track_shape(**overrides):
    shape = {
        "location": "loc",
        "identifier": "id",
        "title": "title",
        "creator": "creator",
        "annotation": "annotation",
        "info": "info",
        "image": "image",
        "album": "album",
        "trackNum": 1,
        "duration": 100,
        "link": [],
        "meta": [],
        "extension": {},
    }
    shape.update(overrides)
    return shape


class TestPlaylistMetadata(unittest.TestCase):
    def test_metadata_setters(self) -> None:
        playlist = Playlist()
        self.assertTrue(Playlist.is_playlist(playlist))
        self.assertFalse(Playlist.is_playlist(playlist.to_record()))
        self.assertTrue(playlist.set_title("My Playlist"))
        self.assertEqual(playlist.get_title(), "My Playlist")
        self.assertTrue(playlist.set_creator("Author"))
        self.assertTrue(playlist.set_annotation("Notes"))
        self.assertTrue(playlist.set_info("Info"))
        self.assertTrue(playlist.set_location("https://example.com"))
        self.assertTrue(playlist.set_identifier("playlist-id"))
        self.assertTrue(playlist.set_image("image.png"))
        self.assertTrue(playlist.set_date("2024-01-01"))
        self.assertTrue(playlist.set_license("MIT"))
        self.assertTrue(playlist.set_attribution([{"role": "dj"}]))
        self.assertTrue(playlist.set_link([{"rel": "alternate"}]))
        self.assertTrue(playlist.set_meta([{"name": "genre", "value": "rock"}]))
        self.assertTrue(playlist.set_extension({"foo": "bar"}))

        serialized = playlist.to_json()
        self.assertIn("My Playlist", serialized)
        self.assertTrue(Playlist.is_parsable(json.loads(serialized)))

    def test_metadata_setters_reject_wrong_types(self) -> None:
        playlist = Playlist(title="kept", license="MIT")
        self.assertFalse(playlist.set_title(1))
        self.assertFalse(playlist.set_license(None))
        self.assertFalse(playlist.set_attribution({"role": "dj"}))
        self.assertFalse(playlist.set_extension([]))
        self.assertEqual(playlist.get_title(), "kept")
        self.assertEqual(playlist.get_license(), "MIT")
        self.assertEqual(playlist.get_attribution(), [])
        self.assertEqual(playlist.get_extension(), {})

    def test_date_accepts_strings_and_dates(self) -> None:
        playlist = Playlist()
        self.assertEqual(playlist.get_date(), "")
        self.assertTrue(playlist.set_date(date(2025, 3, 1)))
        self.assertEqual(playlist.get_date(), date(2025, 3, 1))
        self.assertFalse(playlist.set_date(20250301))
        self.assertEqual(playlist.get_date(), date(2025, 3, 1))
        self.assertIn('"2025-03-01"', playlist.to_json())

    def test_initializer_validates(self) -> None:
        with self.assertRaises(PlaylistTypeError):
            Playlist(title=3)  # type: ignore[arg-type]
        with self.assertRaises(PlaylistTypeError):
            Playlist(track="nope")  # type: ignore[arg-type]
        with self.assertRaises(TrackTypeError):
            Playlist(track=[_track_shape(), {"location": 1}])


class TestTrackCollection(unittest.TestCase):
    def test_initializer_normalizes_tracks(self) -> None:
        existing = Track(title="kept instance")
        playlist = Playlist(track=[_track_shape(), existing])
        tracks = playlist.get_track()
        self.assertEqual(len(tracks), 2)
        self.assertIsInstance(tracks[0], Track)
        self.assertIs(tracks[1], existing)

    def test_get_track_by_id(self) -> None:
        playlist = Playlist(track=[_track_shape()])
        self.assertEqual(playlist.get_track_by_id(0).get_title(), "title")
        self.assertIsNone(playlist.get_track_by_id(1))
        self.assertIsNone(playlist.get_track_by_id(10))
        self.assertIsNone(playlist.get_track_by_id(-1))
        self.assertIsNone(playlist.get_track_by_id("0"))

    def test_get_track_list_is_a_snapshot(self) -> None:
        playlist = Playlist(track=[_track_shape()])
        tracks = playlist.get_track()
        tracks.clear()
        self.assertEqual(len(playlist.get_track()), 1)
        playlist.get_track()[0].set_title("edited")
        self.assertEqual(playlist.get_track_by_id(0).get_title(), "edited")

    def test_collection_predicates(self) -> None:
        self.assertTrue(Playlist.is_track_collection([Track(), _track_shape()]))
        self.assertTrue(Playlist.is_track_collection([]))
        self.assertFalse(Playlist.is_track_collection([{}]))
        self.assertFalse(Playlist.is_track_collection([42]))
        self.assertFalse(Playlist.is_track_collection(Track()))
        self.assertTrue(Playlist.is_parsable_track_collection([_track_shape()]))
        self.assertFalse(Playlist.is_parsable_track_collection([Track()]))
        self.assertFalse(Playlist.is_parsable_track_collection([{}]))

    def test_push_track(self) -> None:
        playlist = Playlist(track=[_track_shape()])
        self.assertTrue(playlist.push_track(Track.coerce(_track_shape(title="two"))))
        self.assertTrue(playlist.push_track(_track_shape(title="three")))
        self.assertEqual(len(playlist.get_track()), 3)
        self.assertFalse(playlist.push_track({}))
        self.assertFalse(playlist.push_track({"location": 123}))
        self.assertFalse(playlist.push_track("nope"))
        self.assertEqual(len(playlist.get_track()), 3)

    def test_pushed_track_instances_are_not_copied(self) -> None:
        shared = Track(title="shared")
        first = Playlist()
        second = Playlist()
        first.push_track(shared)
        second.push_track(shared)
        self.assertTrue(first.set_track_title(0, "renamed"))
        self.assertIs(second.get_track_by_id(0), shared)
        self.assertEqual(second.get_track_by_id(0).get_title(), "renamed")

    def test_add_track(self) -> None:
        playlist = Playlist()
        self.assertTrue(playlist.add_track("loc", "identifier", "third"))
        added = playlist.get_track_by_id(0)
        self.assertEqual(added.get_title(), "third")
        self.assertEqual(added.get_track_num(), 0)
        self.assertEqual(added.get_link(), [])
        self.assertTrue(playlist.add_track(title="kw", track_num=4, extension={"x": 1}))
        self.assertEqual(playlist.get_track_by_id(1).get_extension(), {"x": 1})
        self.assertFalse(playlist.add_track(123))
        self.assertEqual(len(playlist.get_track()), 2)

    def test_remove_track_removes_one_occurrence(self) -> None:
        candidate = Track.coerce(_track_shape(title="two"))
        playlist = Playlist(track=[_track_shape(), _track_shape(title="two"), _track_shape(title="two")])
        self.assertTrue(playlist.remove_track(candidate))
        self.assertEqual(len(playlist.get_track()), 2)
        self.assertEqual(playlist.get_track_by_id(1).get_title(), "two")
        self.assertTrue(playlist.remove_track(_track_shape(title="two")))
        self.assertFalse(playlist.remove_track(candidate))
        self.assertEqual(len(playlist.get_track()), 1)

    def test_remove_track_with_unparsable_candidate(self) -> None:
        playlist = Playlist(track=[_track_shape()])
        self.assertFalse(playlist.remove_track({}))
        self.assertFalse(playlist.remove_track(None))
        self.assertEqual(len(playlist.get_track()), 1)

    def test_remove_track_uses_deep_equality(self) -> None:
        playlist = Playlist(track=[_track_shape(extension={"a": {"b": [1, 2]}})])
        self.assertFalse(playlist.remove_track(_track_shape(extension={"a": {"b": [2, 1]}})))
        self.assertTrue(playlist.remove_track(_track_shape(extension={"a": {"b": [1, 2]}})))

    def test_set_track_replaces_everything(self) -> None:
        playlist = Playlist(track=[_track_shape(), _track_shape(title="b")])
        self.assertTrue(playlist.set_track([_track_shape(title="reset")]))
        self.assertEqual([t.get_title() for t in playlist.get_track()], ["reset"])
        self.assertTrue(playlist.set_track([]))
        self.assertEqual(playlist.get_track(), [])

    def test_set_track_is_all_or_nothing(self) -> None:
        playlist = Playlist(track=[_track_shape(title="original")])
        before = playlist.to_record()
        entries = [
            _track_shape(title="1"),
            Track(title="2"),
            {"title": "3"},
            _track_shape(title="4"),
            _track_shape(title="5"),
        ]
        self.assertFalse(playlist.set_track(entries))
        self.assertEqual(playlist.to_record(), before)
        self.assertFalse(playlist.set_track(["nope"]))
        self.assertFalse(playlist.set_track("nope"))
        self.assertEqual(playlist.to_record(), before)


class TestTrackFieldsByIndex(unittest.TestCase):
    def test_updates_track_fields_by_index(self) -> None:
        playlist = Playlist(track=[_track_shape()])
        self.assertTrue(playlist.set_track_location(0, "updated"))
        self.assertEqual(playlist.get_track()[0].get_location(), "updated")
        self.assertTrue(playlist.set_track_identifier(0, "new-id"))
        self.assertTrue(playlist.set_track_title(0, "new title"))
        self.assertTrue(playlist.set_track_creator(0, "new creator"))
        self.assertTrue(playlist.set_track_annotation(0, "notes"))
        self.assertTrue(playlist.set_track_info(0, "info"))
        self.assertTrue(playlist.set_track_image(0, "image"))
        self.assertTrue(playlist.set_track_album(0, "album"))
        self.assertTrue(playlist.set_track_track_num(0, 10))
        self.assertTrue(playlist.set_track_duration(0, 120))
        self.assertTrue(playlist.set_track_link(0, [{"rel": "preview"}]))
        self.assertTrue(playlist.set_track_meta(0, [{"foo": "bar"}]))
        self.assertTrue(playlist.set_track_extension(0, {"ext": True}))

        record = playlist.get_track_by_id(0).to_record()
        self.assertEqual(record["title"], "new title")
        self.assertEqual(record["trackNum"], 10)
        self.assertEqual(record["extension"], {"ext": True})

    def test_out_of_range_index_mutates_nothing(self) -> None:
        playlist = Playlist(track=[_track_shape(), _track_shape(title="b")])
        before = playlist.to_record()
        self.assertFalse(playlist.set_track_location(2, "x"))
        self.assertFalse(playlist.set_track_location(5, "missing"))
        self.assertFalse(playlist.set_track_location(-1, "x"))
        self.assertFalse(playlist.set_track_location(1.0, "x"))
        self.assertFalse(playlist.set_track_location(True, "x"))
        self.assertEqual(playlist.to_record(), before)

    def test_invalid_value_propagates_track_result(self) -> None:
        playlist = Playlist(track=[_track_shape()])
        self.assertFalse(playlist.set_track_duration(0, "long"))
        self.assertFalse(playlist.set_track_link(0, "nope"))
        self.assertEqual(playlist.get_track_by_id(0).get_duration(), 100)


class TestPlaylistRecord(unittest.TestCase):
    def test_record_keys_and_track_order(self) -> None:
        playlist = Playlist(title="t", track=[_track_shape(title="a"), _track_shape(title="b")])
        record = playlist.to_record()
        self.assertEqual(
            list(record),
            [
                "title",
                "creator",
                "annotation",
                "info",
                "location",
                "identifier",
                "image",
                "date",
                "license",
                "attribution",
                "link",
                "meta",
                "extension",
                "track",
            ],
        )
        self.assertEqual([t["title"] for t in record["track"]], ["a", "b"])
        self.assertTrue(Playlist.is_parsable(record))


if __name__ == "__main__":
    unittest.main()
