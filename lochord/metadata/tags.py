"""Tag codec glue: read and write embedded tags through mutagen.

Three container families are handled, each by its own codec:

- ID3 (MP3, WAV, AIFF): text frames, COMM, USLT, APIC
- Vorbis comments (FLAC, Ogg Vorbis, Opus): upper-case field names, FLAC
  picture blocks or METADATA_BLOCK_PICTURE
- MP4 atoms (M4A/AAC in MP4): ``©nam``-style keys, ``trkn``/``disk`` pairs, ``covr``

Empty strings and zero integers remove the corresponding tag on write. An
empty ``cover_art`` leaves the existing cover untouched.
"""

from __future__ import annotations
import abc
import base64
import binascii
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import mutagen
from mutagen import FileType
from mutagen.flac import FLAC, Picture
from mutagen.id3 import (
    APIC,
    COMM,
    ID3,
    TALB,
    TBPM,
    TCOM,
    TCON,
    TCOP,
    TDRC,
    TIT2,
    TPE1,
    TPE2,
    TPOS,
    TPUB,
    TRCK,
    TSRC,
    USLT,
    ID3FileType,
    PictureType,
)
from mutagen.aiff import AIFF
from mutagen.mp4 import MP4, MP4Cover, MP4FreeForm
from mutagen.oggopus import OggOpus
from mutagen.oggvorbis import OggVorbis
from mutagen.wave import WAVE

from ..errors import PathNotFoundError, TagWriteError
from ..models import AudioTags, TrackMetadata

logger = logging.getLogger(__name__)

_YEAR = re.compile(r"\d{4}")
_MIME_TYPES = {"image/jpeg", "image/png", "image/bmp", "image/gif", "image/tiff"}


def _to_int(value: Any) -> int:
    """Leading integer of a tag value ("3/12" -> 3), 0 when absent."""
    if value is None:
        return 0
    m = re.match(r"\s*(\d+)", str(value))
    return int(m.group(1)) if m else 0


def _total_of(value: Any) -> int:
    """Total part of an "n/total" value, 0 when absent."""
    if value is None or "/" not in str(value):
        return 0
    return _to_int(str(value).split("/", 1)[1])


def _year_of(value: Any) -> int:
    m = _YEAR.search(str(value or ""))
    return int(m.group(0)) if m else 0


def _pair(number: int, total: int) -> str:
    return f"{number}/{total}" if total > 0 else str(number)


def encode_data_uri(mime: str | None, data: bytes) -> str:
    mime = mime if mime in _MIME_TYPES else "image/jpeg"
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def decode_data_uri(uri: str) -> Optional[Tuple[str, bytes]]:
    """Split ``data:<mime>;base64,<payload>`` into (mime, bytes); None if malformed."""
    if not uri.startswith("data:") or ";base64," not in uri:
        return None
    header, payload = uri[len("data:"):].split(";base64,", 1)
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        return None
    mime = header if header in _MIME_TYPES else "image/jpeg"
    return mime, data


class TagCodec(abc.ABC):
    """Reads and writes AudioTags for one family of tag containers."""

    @abc.abstractmethod
    def can_handle(self, audio: FileType) -> bool: ...

    @abc.abstractmethod
    def read(self, audio: FileType) -> AudioTags: ...

    @abc.abstractmethod
    def write(self, audio: FileType, tags: AudioTags) -> None: ...

    def save(self, audio: FileType) -> None:
        audio.save()


class ID3Codec(TagCodec):
    TEXT_FRAMES = {
        "title": TIT2,
        "artist": TPE1,
        "album_artist": TPE2,
        "album": TALB,
        "genre": TCON,
        "composer": TCOM,
        "copyright": TCOP,
        "publisher": TPUB,
        "isrc": TSRC,
    }

    def can_handle(self, audio: FileType) -> bool:
        return isinstance(audio.tags, ID3) or isinstance(audio, (ID3FileType, WAVE, AIFF))

    def read(self, audio: FileType) -> AudioTags:
        id3 = audio.tags
        tags = AudioTags()
        if id3 is None:
            return tags

        def _text(frame_id: str) -> str:
            frame = id3.get(frame_id)
            return str(frame.text[0]) if frame is not None and frame.text else ""

        for field, frame_cls in self.TEXT_FRAMES.items():
            setattr(tags, field, _text(frame_cls.__name__))
        tags.year = _year_of(_text("TDRC") or _text("TYER"))
        trck, tpos = _text("TRCK"), _text("TPOS")
        tags.track_number, tags.total_tracks = _to_int(trck), _total_of(trck)
        tags.disc_number, tags.total_discs = _to_int(tpos), _total_of(tpos)
        tags.bpm = _to_int(_text("TBPM"))
        comments = id3.getall("COMM")
        tags.comment = str(comments[0].text[0]) if comments and comments[0].text else ""
        lyrics = id3.getall("USLT")
        tags.lyrics = str(lyrics[0].text) if lyrics else ""
        covers = [f for f in id3.getall("APIC") if f.type == PictureType.COVER_FRONT] or id3.getall("APIC")
        if covers:
            tags.cover_art = encode_data_uri(covers[0].mime, covers[0].data)
        return tags

    def write(self, audio: FileType, tags: AudioTags) -> None:
        if audio.tags is None:
            audio.add_tags()
        id3 = audio.tags

        def _set(frame_cls, value: str) -> None:
            frame_id = frame_cls.__name__
            if value:
                id3.setall(frame_id, [frame_cls(encoding=3, text=[value])])
            else:
                id3.delall(frame_id)

        for field, frame_cls in self.TEXT_FRAMES.items():
            _set(frame_cls, getattr(tags, field))
        _set(TDRC, str(tags.year) if tags.year > 0 else "")
        id3.delall("TYER")
        _set(TRCK, _pair(tags.track_number, tags.total_tracks) if tags.track_number > 0 else "")
        _set(TPOS, _pair(tags.disc_number, tags.total_discs) if tags.disc_number > 0 else "")
        _set(TBPM, str(tags.bpm) if tags.bpm > 0 else "")

        if tags.comment:
            id3.setall("COMM", [COMM(encoding=3, lang="eng", desc="", text=[tags.comment])])
        else:
            id3.delall("COMM")
        if tags.lyrics:
            id3.setall("USLT", [USLT(encoding=3, lang="eng", desc="", text=tags.lyrics)])
        else:
            id3.delall("USLT")

        cover = decode_data_uri(tags.cover_art) if tags.cover_art else None
        if cover:
            mime, data = cover
            others = [f for f in id3.getall("APIC") if f.type != PictureType.COVER_FRONT]
            new = APIC(encoding=3, mime=mime, type=PictureType.COVER_FRONT, desc="Cover", data=data)
            id3.setall("APIC", others + [new])

    def save(self, audio: FileType) -> None:
        if isinstance(audio, ID3FileType):
            audio.save(v2_version=3)
        else:
            audio.save()


class VorbisCodec(TagCodec):
    FIELDS = {
        "title": ["TITLE"],
        "artist": ["ARTIST"],
        "album_artist": ["ALBUMARTIST", "ALBUM ARTIST"],
        "album": ["ALBUM"],
        "genre": ["GENRE"],
        "composer": ["COMPOSER"],
        "comment": ["COMMENT", "DESCRIPTION"],
        "lyrics": ["LYRICS", "UNSYNCEDLYRICS"],
        "copyright": ["COPYRIGHT"],
        "publisher": ["ORGANIZATION", "LABEL", "PUBLISHER"],
        "isrc": ["ISRC"],
    }

    def can_handle(self, audio: FileType) -> bool:
        return isinstance(audio, (FLAC, OggVorbis, OggOpus))

    @staticmethod
    def _first(comments, keys: List[str]) -> str:
        for key in keys:
            values = comments.get(key)
            if values:
                return str(values[0])
        return ""

    def read(self, audio: FileType) -> AudioTags:
        tags = AudioTags()
        comments = audio.tags
        if comments is not None:
            for field, keys in self.FIELDS.items():
                setattr(tags, field, self._first(comments, keys))
            tags.year = _year_of(self._first(comments, ["DATE", "YEAR"]))
            track = self._first(comments, ["TRACKNUMBER"])
            disc = self._first(comments, ["DISCNUMBER"])
            tags.track_number = _to_int(track)
            tags.total_tracks = _to_int(self._first(comments, ["TRACKTOTAL", "TOTALTRACKS"])) or _total_of(track)
            tags.disc_number = _to_int(disc)
            tags.total_discs = _to_int(self._first(comments, ["DISCTOTAL", "TOTALDISCS"])) or _total_of(disc)
            tags.bpm = _to_int(self._first(comments, ["BPM"]))

        picture = self._front_cover(audio)
        if picture is not None:
            tags.cover_art = encode_data_uri(picture.mime, picture.data)
        return tags

    def _pictures(self, audio: FileType) -> List[Picture]:
        if isinstance(audio, FLAC):
            return list(audio.pictures)
        pictures = []
        for raw in (audio.tags or {}).get("METADATA_BLOCK_PICTURE", []):
            try:
                pictures.append(Picture(base64.b64decode(raw)))
            except (binascii.Error, mutagen.MutagenError, ValueError):
                logger.debug("[skip] unreadable METADATA_BLOCK_PICTURE")
        return pictures

    def _front_cover(self, audio: FileType) -> Optional[Picture]:
        pictures = self._pictures(audio)
        fronts = [p for p in pictures if p.type == PictureType.COVER_FRONT]
        return (fronts or pictures or [None])[0]

    def write(self, audio: FileType, tags: AudioTags) -> None:
        if audio.tags is None:
            audio.add_tags()
        comments = audio.tags

        def _set(keys: List[str], value: str) -> None:
            for key in keys[1:]:
                if key in comments:
                    del comments[key]
            if value:
                comments[keys[0]] = [value]
            elif keys[0] in comments:
                del comments[keys[0]]

        for field, keys in self.FIELDS.items():
            _set(keys, getattr(tags, field))
        _set(["DATE", "YEAR"], str(tags.year) if tags.year > 0 else "")
        _set(["TRACKNUMBER"], str(tags.track_number) if tags.track_number > 0 else "")
        _set(["TRACKTOTAL", "TOTALTRACKS"], str(tags.total_tracks) if tags.total_tracks > 0 else "")
        _set(["DISCNUMBER"], str(tags.disc_number) if tags.disc_number > 0 else "")
        _set(["DISCTOTAL", "TOTALDISCS"], str(tags.total_discs) if tags.total_discs > 0 else "")
        _set(["BPM"], str(tags.bpm) if tags.bpm > 0 else "")

        cover = decode_data_uri(tags.cover_art) if tags.cover_art else None
        if cover:
            mime, data = cover
            picture = Picture()
            picture.type = PictureType.COVER_FRONT
            picture.mime = mime
            picture.desc = "Cover"
            picture.data = data
            others = [p for p in self._pictures(audio) if p.type != PictureType.COVER_FRONT]
            if isinstance(audio, FLAC):
                audio.clear_pictures()
                for p in others + [picture]:
                    audio.add_picture(p)
            else:
                comments["METADATA_BLOCK_PICTURE"] = [
                    base64.b64encode(p.write()).decode("ascii") for p in others + [picture]
                ]


class MP4Codec(TagCodec):
    FIELDS = {
        "title": "\xa9nam",
        "artist": "\xa9ART",
        "album_artist": "aART",
        "album": "\xa9alb",
        "genre": "\xa9gen",
        "composer": "\xa9wrt",
        "comment": "\xa9cmt",
        "lyrics": "\xa9lyr",
        "copyright": "cprt",
    }
    FREEFORM = {
        "publisher": "----:com.apple.iTunes:LABEL",
        "isrc": "----:com.apple.iTunes:ISRC",
    }

    def can_handle(self, audio: FileType) -> bool:
        return isinstance(audio, MP4)

    def read(self, audio: FileType) -> AudioTags:
        tags = AudioTags()
        atoms = audio.tags
        if atoms is None:
            return tags
        for field, key in self.FIELDS.items():
            values = atoms.get(key)
            setattr(tags, field, str(values[0]) if values else "")
        for field, key in self.FREEFORM.items():
            values = atoms.get(key)
            setattr(tags, field, bytes(values[0]).decode("utf-8", errors="replace") if values else "")
        tags.year = _year_of((atoms.get("\xa9day") or [""])[0])
        trkn = (atoms.get("trkn") or [(0, 0)])[0]
        disk = (atoms.get("disk") or [(0, 0)])[0]
        tags.track_number, tags.total_tracks = int(trkn[0] or 0), int(trkn[1] or 0)
        tags.disc_number, tags.total_discs = int(disk[0] or 0), int(disk[1] or 0)
        tags.bpm = int((atoms.get("tmpo") or [0])[0] or 0)
        covers = atoms.get("covr")
        if covers:
            mime = "image/png" if covers[0].imageformat == MP4Cover.FORMAT_PNG else "image/jpeg"
            tags.cover_art = encode_data_uri(mime, bytes(covers[0]))
        return tags

    def write(self, audio: FileType, tags: AudioTags) -> None:
        if audio.tags is None:
            audio.add_tags()
        atoms = audio.tags

        def _set(key: str, value: Any) -> None:
            if value:
                atoms[key] = value
            elif key in atoms:
                del atoms[key]

        for field, key in self.FIELDS.items():
            value = getattr(tags, field)
            _set(key, [value] if value else None)
        for field, key in self.FREEFORM.items():
            value = getattr(tags, field)
            _set(key, [MP4FreeForm(value.encode("utf-8"))] if value else None)
        _set("\xa9day", [str(tags.year)] if tags.year > 0 else None)
        _set("trkn", [(tags.track_number, tags.total_tracks)] if tags.track_number > 0 else None)
        _set("disk", [(tags.disc_number, tags.total_discs)] if tags.disc_number > 0 else None)
        _set("tmpo", [tags.bpm] if tags.bpm > 0 else None)

        cover = decode_data_uri(tags.cover_art) if tags.cover_art else None
        if cover:
            mime, data = cover
            fmt = MP4Cover.FORMAT_PNG if mime == "image/png" else MP4Cover.FORMAT_JPEG
            atoms["covr"] = [MP4Cover(data, imageformat=fmt)]


CODECS: List[TagCodec] = [ID3Codec(), VorbisCodec(), MP4Codec()]


def _codec_for(audio: FileType) -> Optional[TagCodec]:
    for codec in CODECS:
        if codec.can_handle(audio):
            return codec
    return None


def open_audio_file(path: str | Path) -> Optional[FileType]:
    """Open an audio file with mutagen; None when unreadable or unsupported."""
    try:
        return mutagen.File(str(path), easy=False)
    except Exception as e:
        logger.debug(f"[unreadable] {path}: {e}")
        return None


def _duration_seconds(audio: FileType | None) -> int:
    length = getattr(getattr(audio, "info", None), "length", None)
    try:
        return max(int(length or 0), 0)
    except (TypeError, ValueError):
        return 0


def read_track_metadata(path: str | Path) -> TrackMetadata:
    """Return (title, artist, duration) of an audio file.

    Title defaults to the file name without extension, artist to an empty
    string and duration to 0 when the file cannot be read.
    """
    stem = Path(path).stem or "Unknown"
    audio = open_audio_file(path)
    if audio is None:
        return TrackMetadata(title=stem)
    codec = _codec_for(audio)
    tags = codec.read(audio) if codec else AudioTags()
    return TrackMetadata(title=tags.title or stem, artist=tags.artist, duration=_duration_seconds(audio))


def read_audio_tags(path: str | Path) -> AudioTags:
    """Read every editable tag of an audio file, including the front cover."""
    if not Path(path).exists():
        raise PathNotFoundError(str(path), "File")
    audio = open_audio_file(path)
    codec = _codec_for(audio) if audio is not None else None
    tags = codec.read(audio) if codec else AudioTags()
    if not tags.title:
        tags.title = Path(path).stem
    return tags


def write_audio_tags(path: str | Path, tags: AudioTags) -> None:
    """Write tags to an audio file in place.

    Raises:
        PathNotFoundError: the file does not exist
        TagWriteError: the container is unsupported or mutagen failed to save
    """
    if not Path(path).exists():
        raise PathNotFoundError(str(path), "File")
    try:
        audio = mutagen.File(str(path), easy=False)
    except mutagen.MutagenError as e:
        raise TagWriteError(str(path), e) from e
    codec = _codec_for(audio) if audio is not None else None
    if codec is None:
        raise TagWriteError(str(path), ValueError("unsupported audio format"))
    try:
        codec.write(audio, tags)
        codec.save(audio)
    except (mutagen.MutagenError, OSError, ValueError) as e:
        raise TagWriteError(str(path), e) from e
    logger.debug(f"[tagged] {path} title='{tags.title}' artist='{tags.artist}'")


def tags_summary(tags: AudioTags) -> Dict[str, Any]:
    """Tag fields for display, with the cover reduced to its size."""
    data = tags.to_dict()
    if tags.cover_art:
        decoded = decode_data_uri(tags.cover_art)
        data["coverArt"] = f"<{decoded[0]}, {len(decoded[1])} bytes>" if decoded else "<invalid>"
    return data


__all__ = [
    "TagCodec",
    "ID3Codec",
    "VorbisCodec",
    "MP4Codec",
    "read_track_metadata",
    "read_audio_tags",
    "write_audio_tags",
    "encode_data_uri",
    "decode_data_uri",
    "tags_summary",
]
