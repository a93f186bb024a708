#!/usr/bin/env python
# coding: utf-8

from dataclasses import dataclass, field, InitVar, replace
from functools import reduce
import logging
import math

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rect:
    """
    Rectangle in svg-like coords (origin left top, y pointing downwards).

    Width and height may be given negative; the stored extents are always
    non-negative and anchored at (xlt, ylt).
    """
    idx: int
    xlt: float
    ylt: float
    w: InitVar[float]
    h: InitVar[float]
    xrb: float = field(init=False)
    yrb: float = field(init=False)

    def __post_init__(self, w, h):
        object.__setattr__(self, "xrb", self.xlt + abs(w))
        object.__setattr__(self, "yrb", self.ylt + abs(h))

    @property
    def width(self) -> float:
        return self.xrb - self.xlt

    @property
    def height(self) -> float:
        return self.yrb - self.ylt

    def show_coords(self, y_shift: float = 0) -> str:
        return f"idx: {self.idx}, ({self.xlt}, {self.ylt + y_shift}) -> ({self.xrb}, {self.yrb + y_shift})"


@dataclass(frozen=True)
class Track:
    """A horizontal lane holding rects that keep clear of each other in x."""
    yindex: int
    rects: tuple = ()
    ybase: float = 0

    @property
    def max_height(self) -> float:
        return max(rect.height for rect in self.rects)

    def add_rect(self, rect: Rect) -> "Track":
        return replace(self, rects=self.rects + (rect,))

    def accommodates(self, rect: Rect, xspace: float) -> bool:
        """
        Check if a rect fits on this track without coming within xspace of any member.

        Args:
            rect: Candidate rectangle
            xspace: Minimum horizontal clearance to every rect already on the track

        Returns:
            True if the widened span [xlt - xspace, xrb + xspace] is strictly
            disjoint from every member, False otherwise
        """
        xleft = rect.xlt - xspace
        xright = rect.xrb + xspace

        for test_rect in self.rects:
            no_overlap = xleft > test_rect.xrb or xright < test_rect.xlt
            if not no_overlap:
                return False

        return True


def _check_non_negative(name: str, value) -> None:
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"{name} must be a finite number >= 0, got {value!r}")


def _check_rects(rects) -> None:
    for rect in rects:
        if not all(math.isfinite(v) for v in (rect.xlt, rect.xrb, rect.ylt, rect.yrb)):
            raise ValueError(f"Rect {rect.idx} has non-finite coordinates: {rect.show_coords()}")


def assign_tracks(rects, x_min_gap: float) -> list[Track]:
    """
    Place rects into tracks so that rects sharing a track keep x_min_gap apart.

    Rects are taken in ascending xlt order (stable, so ties keep input order)
    and each goes to the first existing track that accommodates it; a new
    track is opened only when none does. Left-endpoint order plus first fit
    uses the minimum number of tracks.

    Args:
        rects: Iterable of Rect; not modified and not reordered
        x_min_gap: Minimum horizontal clearance between rects on one track

    Returns:
        List of tracks in creation order

    Raises:
        ValueError: If x_min_gap is negative or any coordinate is not finite
    """
    _check_non_negative("x_min_gap", x_min_gap)
    sorted_rects = sorted(rects, key=lambda rect: rect.xlt)
    _check_rects(sorted_rects)

    for rect in sorted_rects:
        logger.debug(rect.show_coords())

    def place(tracks, rect):
        for i, track in enumerate(tracks):
            if track.accommodates(rect, x_min_gap):
                return tracks[:i] + (track.add_rect(rect),) + tracks[i + 1:]
        return tracks + (Track(yindex=len(tracks), rects=(rect,)),)

    return list(reduce(place, sorted_rects, ()))


def set_track_bases(tracks: list[Track], track_gap: float, track_height: float | None = None,
                    compact: bool = False) -> list[Track]:
    """
    Compute the base y value of each track from the track heights and the gap between tracks.

    Args:
        tracks: Tracks in creation order
        track_gap: Vertical gap added before every track
        track_height: Uniform track height, required unless compact is True
        compact: Use the tallest rect of each track as its height instead of track_height

    Returns:
        New list of tracks with ybase set; bases increase with creation order

    Raises:
        ValueError: If track_gap or track_height is negative, or track_height is missing
    """
    _check_non_negative("track_gap", track_gap)
    if not compact:
        if track_height is None:
            raise ValueError("track_height is required unless compact is True")
        _check_non_negative("track_height", track_height)

    placed = []
    ybase = 0
    for track in tracks:
        eff_track_height = track.max_height if compact else track_height
        ybase = ybase + track_gap + eff_track_height
        placed.append(replace(track, ybase=ybase))
        logger.debug(f"track index: {track.yindex}, ybase: {ybase}, rects: {len(track.rects)}")

    return placed


def stack_rects(rects, x_min_gap: float, track_gap: float, track_height: float | None = None,
                compact: bool = False) -> dict:
    """
    Stack rectangles into tracks when they overlap in the x-dimension.

    Args:
        rects: Iterable of Rect; the caller's sequence keeps its order
        x_min_gap: Minimum horizontal clearance between rects on one track
        track_gap: Vertical gap between tracks
        track_height: Uniform track height, required unless compact is True
        compact: Size each track by its tallest rect

    Returns:
        Dictionary mapping each rect's idx to the ybase of its track
        (empty for empty input)

    Raises:
        ValueError: On negative or non-finite gaps/heights or rect coordinates
    """
    tracks = assign_tracks(rects, x_min_gap)
    tracks = set_track_bases(tracks, track_gap, track_height, compact)

    return {rect.idx: track.ybase for track in tracks for rect in track.rects}


def stacking_depth(rects, x_min_gap: float = 0) -> int:
    """
    Largest number of rects that pairwise conflict at a single x position.

    Two rects conflict when they are no more than x_min_gap apart, so each
    span is widened by half the gap on both sides and treated as closed.
    This is the number of tracks assign_tracks produces.
    """
    _check_non_negative("x_min_gap", x_min_gap)
    half_gap = x_min_gap / 2

    # starts sort before ends at the same x: touching spans conflict
    events = []
    for rect in rects:
        events.append((rect.xlt - half_gap, 0))
        events.append((rect.xrb + half_gap, 1))

    depth = 0
    max_depth = 0
    for _, kind in sorted(events):
        depth += 1 if kind == 0 else -1
        max_depth = max(max_depth, depth)

    return max_depth
