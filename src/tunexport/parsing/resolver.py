"""Resolve the playlist hierarchy.

Playlists in the library document reference their parent folder through
``Parent Persistent ID``, in no particular order: a child may well appear
before its parent. The resolver turns the flat list of playlist builders into
a forest of :class:`Playlist` objects, building every playlist only after its
parent.

It works on a FIFO worklist. A builder whose parent has not been built yet
goes back to the end of the list. In the worst case the playlists form a
single chain listed child-first; one pass over the worklist (at most ``n``
steps) then resolves at least one more playlist, so ``n * n`` steps resolve
all of them. The worklist is abandoned after ``n * n + n + 1`` steps, which
can only happen if the parent references contain a cycle.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Optional, Sequence, Set

from tunexport.library.models import Playlist
from tunexport.parsing.builders import PlaylistBuilder
from tunexport.parsing.diagnostics import DiagnosticCode, Diagnostics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IgnorePolicy:
    """Which playlists are dropped (together with their descendants) during resolution."""
    ignore_empty_playlists: bool = False
    ignore_non_music_playlists: bool = False
    ignore_distinguished_playlists: bool = False
    ignore_master: bool = False
    ignore_playlists_by_name: frozenset = frozenset()

    @classmethod
    def from_settings(cls, settings) -> 'IgnorePolicy':
        """Build the policy from :class:`tunexport.config.ParsingSettings`."""
        return cls(
            ignore_empty_playlists=settings.ignore_empty_playlists,
            ignore_non_music_playlists=settings.ignore_non_music_playlists,
            ignore_distinguished_playlists=settings.ignore_distinguished_playlists,
            ignore_master=settings.ignore_master,
            ignore_playlists_by_name=frozenset(settings.ignore_playlists_by_name),
        )

    def reason_to_ignore(self, builder: PlaylistBuilder) -> Optional[str]:
        """Return why the playlist should be ignored, ``None`` if it should be kept."""
        values = builder.values
        if self.ignore_master and values.get("master"):
            return "it is the master playlist"
        if self.ignore_distinguished_playlists and values.get("distinguished_kind") is not None:
            return f"it is distinguished (kind {values.get('distinguished_kind')})"
        if self.ignore_non_music_playlists and is_non_music(builder):
            return "it is not a music playlist"
        if self.ignore_empty_playlists and not builder.track_ids:
            return "it is empty"
        if builder.name is not None and builder.name in self.ignore_playlists_by_name:
            return "its name is on the ignore list"
        return None


def is_non_music(builder: PlaylistBuilder) -> bool:
    """System playlists for movies, TV shows, audiobooks and other non-music media."""
    values = builder.values
    if values.get("movies") or values.get("tv_shows") or values.get("audiobooks"):
        return True
    return values.get("distinguished_kind") is not None and not values.get("music")


@dataclass
class ResolutionResult:
    """Outcome of resolving the playlist hierarchy.

    ``playlists`` is in the order the playlists were built, which is a valid
    topological order (every parent before its children).
    """
    playlists: List[Playlist] = field(default_factory=list)
    top_level: List[Playlist] = field(default_factory=list)
    unresolved: List[PlaylistBuilder] = field(default_factory=list)
    ignored: List[PlaylistBuilder] = field(default_factory=list)
    dangling: List[PlaylistBuilder] = field(default_factory=list)
    iterations: int = 0
    max_iterations: int = 0

    @property
    def complete(self) -> bool:
        """``False`` if some playlists are stuck in a parent cycle."""
        return not self.unresolved


class PlaylistResolver:
    """Builds playlists from builders once their parents are available."""

    def __init__(self, policy: Optional[IgnorePolicy] = None, diagnostics: Optional[Diagnostics] = None):
        self.policy = policy or IgnorePolicy()
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics(logger)

    @staticmethod
    def max_iterations_for(count: int) -> int:
        return count * count + count + 1

    def resolve(self, builders: Sequence[PlaylistBuilder]) -> ResolutionResult:
        """Resolve parent/child relations and build all resolvable playlists.

        Args:
            builders: Playlist builders with unique persistent ids

        Returns:
            The resolution result; check ``complete`` for cycles
        """
        worklist: Deque[PlaylistBuilder] = deque(builders)
        result = ResolutionResult(max_iterations=self.max_iterations_for(len(worklist)))

        resolved: Dict[str, Playlist] = {}
        ignored_ids: Set[str] = set()
        pending_ids: Set[str] = {builder.persistent_id for builder in worklist}

        while worklist:
            if result.iterations >= result.max_iterations:
                self._report_unresolved(worklist, result)
                break
            result.iterations += 1

            builder = worklist.popleft()
            persistent_id = builder.persistent_id
            pending_ids.discard(persistent_id)
            parent_id = builder.parent_persistent_id

            reason = self.policy.reason_to_ignore(builder)
            if reason is None and parent_id is not None and parent_id in ignored_ids:
                reason = "its parent is ignored"
            if reason is not None:
                ignored_ids.add(persistent_id)
                result.ignored.append(builder)
                self.diagnostics.debug(
                    DiagnosticCode.IGNORED_PLAYLIST,
                    f"ignoring playlist because {reason}",
                    entity=f"playlist {builder}",
                    reason=reason,
                )
                continue

            parent = None
            if parent_id is not None:
                parent = resolved.get(parent_id)
                if parent is None:
                    if parent_id in pending_ids or parent_id == persistent_id:
                        # the parent exists but has not been built yet
                        worklist.append(builder)
                        pending_ids.add(persistent_id)
                        continue

                    result.dangling.append(builder)
                    self.diagnostics.warning(
                        DiagnosticCode.DANGLING_PARENT,
                        f"specifies parent playlist with Persistent ID {parent_id}, "
                        "but no such playlist exists; skipping it",
                        entity=f"playlist {builder}",
                        parent_id=parent_id,
                    )
                    continue

            playlist = builder.build(parent)
            resolved[persistent_id] = playlist
            result.playlists.append(playlist)
            if parent is None:
                result.top_level.append(playlist)
            else:
                parent._add_child(playlist)

        if result.complete:
            logger.debug(
                f"Resolved {len(result.playlists)} playlists within {result.iterations} iterations"
            )
        return result

    def _report_unresolved(self, worklist: Deque[PlaylistBuilder], result: ResolutionResult) -> None:
        result.unresolved.extend(worklist)
        self.diagnostics.error(
            DiagnosticCode.UNRESOLVED_PLAYLIST,
            f"Failed to resolve dependencies among playlists within {result.max_iterations} "
            f"iterations; {len(worklist)} playlists with unresolved dependencies: "
            + "; ".join(str(builder) for builder in worklist),
            unresolved=[builder.persistent_id for builder in worklist],
        )
