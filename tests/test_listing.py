from mediaserve.domain.media import DEFAULT_MEDIA_TYPE, guess_media_type, is_video
from mediaserve.service.listing import ListedFile, collect_videos, render_listing


def test_collect_videos_is_recursive_sorted_and_filtered(media_root):
    (media_root / "subdir" / "LOUD.MP4").write_bytes(b"1234")
    names = [f.name for f in collect_videos(media_root)]
    assert names == sorted(names)
    assert set(names) == {
        "empty.webm",
        "movie.mp4",
        "subdir/LOUD.MP4",
        "subdir/sub.mkv",
        "test.mkv",
    }


def test_render_escapes_names_and_quotes_links():
    html = render_listing([ListedFile(name="a<b> & c.mp4", size_bytes=3 * 1024 * 1024)])
    assert "a&lt;b&gt; &amp; c.mp4" in html
    assert 'href="/a%3Cb%3E%20%26%20c.mp4"' in html
    assert "(3.00 MB)" in html


def test_render_empty_listing():
    html = render_listing([])
    assert "<h1>Available Videos</h1>" in html
    assert "<li>" not in html


def test_media_types():
    assert guess_media_type("x/movie.mkv") == "video/x-matroska"
    assert guess_media_type("MOVIE.MP4") == "video/mp4"
    assert guess_media_type("clip.webm") == "video/webm"
    assert guess_media_type("noext") == DEFAULT_MEDIA_TYPE
    assert guess_media_type("data.zzzz") == DEFAULT_MEDIA_TYPE


def test_is_video():
    assert is_video("a/b/c.MOV")
    assert not is_video("notes.txt")
    assert not is_video("mkv")


def test_links_leaving_the_root_are_not_listed(media_root, tmp_path):
    outside = tmp_path / "outside.mkv"
    outside.write_bytes(b"secret")
    (media_root / "leak.mkv").symlink_to(outside)
    (media_root / "alias.mkv").symlink_to(media_root / "test.mkv")

    names = {f.name for f in collect_videos(media_root)}
    assert "leak.mkv" not in names
    assert "alias.mkv" in names
