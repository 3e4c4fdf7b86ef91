"""One slice of an APA partition table: partitions, space map and checks."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import List

from .common import caseless_compare
from .errors import BadApaError, NotAllowedError, PartitionNotFoundError
from .partition import PS2_PART_FLAG_SUB, PartitionHeader

MAP_AVAIL = "."
MAP_MAIN = "M"
MAP_SUB = "s"
MAP_COLL = "x"
MAP_ALLOC = "*"

CHUNK_MB = 128
CHUNK_SECTORS = CHUNK_MB * 1024 * 1024 // 512
SLICE_2_OFFSET = 0x10000000
SYSTEM_PARTITION_TYPE = 1


def _sec(value: int) -> str:
    return f"{(value & 0xFFFFFFFF) >> 8:06x}00"


@dataclass
class ApaPartition:
    """A partition header together with its bookkeeping state."""

    header: PartitionHeader
    existing: bool = True
    modified: bool = False
    linked: bool = True


@dataclass
class ApaSlice:
    """Partitions and 128 MB chunk map of one slice of the disk."""

    slice_index: int = 0
    size_in_mb: int = 0
    total_chunks: int = 0
    allocated_chunks: int = 0
    free_chunks: int = 0
    chunks_map: List[str] = field(default_factory=list)
    parts: List[ApaPartition] = field(default_factory=list)

    @property
    def part_count(self) -> int:
        return len(self.parts)

    @property
    def total_sectors(self) -> int:
        return self.size_in_mb * 1024 * 2

    @property
    def map_string(self) -> str:
        """The chunk map as one string, a character per chunk."""
        return "".join(self.chunks_map)

    def add(self, header: PartitionHeader, existing: bool, linked: bool) -> ApaPartition:
        """Append a copy of header; new partitions are marked modified."""
        part = ApaPartition(
            header=copy.deepcopy(header),
            existing=bool(existing),
            modified=not existing,
            linked=bool(linked),
        )
        self.parts.append(part)
        return part

    def setup_statistics(self) -> None:
        """Rebuild the chunk map and the allocated/free chunk counts."""
        total = self.size_in_mb // CHUNK_MB
        chunk_map = [MAP_AVAIL] * total
        allocated = 0
        for part in self.parts:
            header = part.header
            first = header.start // CHUNK_SECTORS
            count = header.length // CHUNK_SECTORS
            if first + count > total:
                raise BadApaError(
                    f"{_sec(header.start)}: partition extends past the chunk map"
                )
            owner = MAP_MAIN if header.main == 0 else MAP_SUB
            for chunk in range(first, first + count):
                chunk_map[chunk] = owner if chunk_map[chunk] == MAP_AVAIL else MAP_COLL
            allocated += count
        self.total_chunks = total
        self.allocated_chunks = allocated
        self.free_chunks = total - allocated
        self.chunks_map = chunk_map

    def _neighbours(self):
        count = len(self.parts)
        for i, curr in enumerate(self.parts):
            yield self.parts[i - 1], curr, self.parts[(i + 1) % count]

    def _sub_problems(self, header: PartitionHeader) -> List[str]:
        problems = []
        listed = header.subs[:header.nsub]
        count = 0
        for other in self.parts:
            sub = other.header
            if sub.main != header.start:
                continue
            if sub.flags != PS2_PART_FLAG_SUB:
                problems.append(f"{_sec(sub.start)}: mismatching sub-partition flag;")
            entry = next((s for s in listed if s.start == sub.start), None)
            if entry is None:
                problems.append(
                    f"{_sec(sub.start)}: not a sub-partition of {_sec(header.start)};"
                )
            elif entry.length != sub.length:
                problems.append(
                    f"{_sec(sub.start)}: mismatching sub-partition size: "
                    f"{_sec(sub.length)} != {_sec(entry.length)};"
                )
            count += 1
        if count != header.nsub:
            problems.append(
                f"{_sec(header.start)}: only {count} sub-partitions found of {header.nsub};"
            )
        return problems

    def problems(self) -> List[str]:
        """Describe every inconsistency found, one message per problem."""
        problems: List[str] = []
        total = self.total_sectors
        for part in self.parts:
            header = part.header
            checksum = header.compute_checksum()
            if header.checksum != checksum:
                problems.append(
                    f"{_sec(header.start)}: bad checksum: "
                    f"0x{header.checksum:08x} instead of 0x{checksum:08x};"
                )
            if not (header.start < total and header.start + header.length <= total):
                problems.append(
                    f"{_sec(header.start)} +{_sec(header.length)}: outside data area;"
                )
            if header.length % CHUNK_SECTORS:
                problems.append(
                    f"{_sec(header.start)}: size {_sec(header.length)} "
                    f"not multiple to 128MB;"
                )
            if header.length == 0 or header.start % header.length:
                problems.append(
                    f"{_sec(header.start)}: start not multiple to size "
                    f"{_sec(header.length)};"
                )
            if header.main == 0 and header.flags == 0 and header.start != 0:
                problems.extend(self._sub_problems(header))

        for prev, curr, nxt in self._neighbours():
            if curr.header.prev != prev.header.start:
                problems.append(
                    f"{_sec(curr.header.start)}: previous is {_sec(prev.header.start)}, "
                    f"not {_sec(curr.header.prev)};"
                )
            if curr.header.next != nxt.header.start:
                problems.append(
                    f"{_sec(curr.header.start)}: next is {_sec(nxt.header.start)}, "
                    f"not {_sec(curr.header.next)};"
                )
        return problems

    def check(self) -> None:
        """Raise BadApaError describing the first inconsistency, if any."""
        problems = self.problems()
        if problems:
            raise BadApaError(problems[0])

    def find(self, name: str) -> int:
        """Index of the main partition called name, ignoring case."""
        for index, part in enumerate(self.parts):
            if part.header.main == 0 and caseless_compare(
                part.header.trimmed_id(), name
            ):
                return index
        raise PartitionNotFoundError(name)

    def delete(self, name: str) -> None:
        """Remove a partition and its sub-partitions, freeing their chunks."""
        header = self.parts[self.find(name)].header
        if header.type == SYSTEM_PARTITION_TYPE:
            raise NotAllowedError(f"{name}: system partitions cannot be deleted")

        pending = {header.start}
        pending.update(sub.start for sub in header.subs[:header.nsub])

        kept = []
        for part in self.parts:
            if part.header.start not in pending:
                kept.append(part)
                continue
            first = part.header.start // CHUNK_SECTORS
            for chunk in range(first, first + part.header.length // CHUNK_SECTORS):
                if chunk < len(self.chunks_map):
                    self.chunks_map[chunk] = MAP_AVAIL
                self.allocated_chunks -= 1
                self.free_chunks += 1
        self.parts = kept
        self.normalize_linked_list()

    def normalize_linked_list(self) -> None:
        """Sort by start sector and relink prev/next as a circular list."""
        self.parts.sort(key=lambda part: part.header.start)
        for prev, curr, nxt in self._neighbours():
            header = curr.header
            if header.prev != prev.header.start:
                curr.modified = True
                header.prev = prev.header.start
            if header.next != nxt.header.start:
                curr.modified = True
                header.next = nxt.header.start
            if curr.modified:
                header.update_checksum()