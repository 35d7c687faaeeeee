"""Character-level Levenshtein distance with explicit edit scripts."""


import logging


from typing import Any, List, NamedTuple, Sequence, Tuple, Union


MAX_CELLS = 50_000_000


Cost = int
String = Sequence[Any]


class Insertion(NamedTuple):
    char: Any
    position: int # in target


class Deletion(NamedTuple):
    char: Any
    position: int # in source


class Substitution(NamedTuple):
    old: Any
    new: Any
    position: int # in source


Change = Union[Insertion, Deletion, Substitution]
Script = List[Change]


class IndexExhaustionError(IndexError):
    """Raised when backtracking steps outside the matrix or the strings.

    This means the matrix does not belong to the strings it is traced against
    or there is a bug in the tracer. It is not a user error.
    """


class MatrixTooLargeError(MemoryError):

    def __init__(self, source_length: int, target_length: int, max_cells: int):
        super().__init__(
            f'cannot diff {source_length} x {target_length} characters: '
            f'matrix needs {(source_length + 1) * (target_length + 1)} cells, '
            f'limit is {max_cells}'
        )
        self.source_length = source_length
        self.target_length = target_length
        self.max_cells = max_cells


class Matrix:
    """Distance matrix stored row by row in a single flat list."""

    def __init__(self, height: int, width: int) -> None:
        self.height = height
        self.width = width
        self.cells: List[Cost] = [0] * (height * width)

    def __getitem__(self, index: Tuple[int, int]) -> Cost:
        i, j = index
        if not (0 <= i < self.height and 0 <= j < self.width):
            raise IndexExhaustionError(
                f'cell ({i}, {j}) outside {self.height}x{self.width} matrix'
            )
        return self.cells[i * self.width + j]

    def __repr__(self) -> str:
        return f'Matrix(height={self.height}, width={self.width})'


def matrix(source: String, target: String, max_cells: int=MAX_CELLS) -> Matrix:
    source = tuple(source)
    target = tuple(target)
    height = len(source) + 1
    width = len(target) + 1
    if height * width > max_cells:
        raise MatrixTooLargeError(len(source), len(target), max_cells)
    try:
        result = Matrix(height, width)
    except MemoryError as e:
        raise MatrixTooLargeError(len(source), len(target), max_cells) from e
    logging.debug('Building %dx%d matrix', height, width)
    cells = result.cells
    for i in range(height):
        cells[i * width] = i
    for j in range(width):
        cells[j] = j
    for i in range(1, height):
        row = i * width
        above = row - width
        char = source[i - 1]
        for j in range(1, width):
            if char == target[j - 1]:
                cells[row + j] = cells[above + j - 1]
            else:
                cells[row + j] = 1 + min(
                    cells[above + j],     # delete
                    cells[row + j - 1],   # insert
                    cells[above + j - 1], # substitute
                )
    return result


def distance(matrix: Matrix) -> Cost:
    return matrix[matrix.height - 1, matrix.width - 1]


def _at(string: Tuple[Any, ...], index: int) -> Any:
    # negative indices would silently wrap around
    if not 0 <= index < len(string):
        raise IndexExhaustionError(
            f'position {index} outside string of length {len(string)}'
        )
    return string[index]


def script(matrix: Matrix, source: String, target: String) -> Script:
    """Traces the matrix back from the last cell and returns the edits.

    Edits come out latest position first. Where a deletion and an insertion
    cost the same, the edit is a substitution, unless the diagonal is more
    expensive, in which case deletion wins.
    """
    source = tuple(source)
    target = tuple(target)
    if (matrix.height, matrix.width) != (len(source) + 1, len(target) + 1):
        raise ValueError(
            f'{matrix!r} does not fit strings of length {len(source)} and '
            f'{len(target)}'
        )
    result: Script = []
    i = len(source)
    j = len(target)
    while i != 0 and j != 0:
        old = _at(source, i - 1)
        new = _at(target, j - 1)
        if old == new:
            i -= 1
            j -= 1
            continue
        up = matrix[i - 1, j]
        left = matrix[i, j - 1]
        if up < left or (up == left and matrix[i - 1, j - 1] > up):
            result.append(Deletion(old, i - 1))
            i -= 1
        elif up > left:
            result.append(Insertion(new, j - 1))
            j -= 1
        else:
            result.append(Substitution(old, new, i - 1))
            i -= 1
            j -= 1
        logging.debug('%r, now at (%d, %d)', result[-1], i, j)
    if i:
        logging.debug('Deleting remaining %d characters', i)
    while i != 0:
        i -= 1
        result.append(Deletion(_at(source, i), i))
    if j:
        logging.debug('Inserting remaining %d characters', j)
    while j != 0:
        j -= 1
        result.append(Insertion(_at(target, j), j))
    assert len(result) == distance(matrix)
    return result


def diff(text1: String, text2: String, max_cells: int=MAX_CELLS) -> Script:
    """Returns a minimal edit script turning text1 into text2."""
    text1 = tuple(text1)
    text2 = tuple(text2)
    return script(matrix(text1, text2, max_cells), text1, text2)


def apply(source: String, script: Script) -> Union[str, List[Any]]:
    """Applies a script as returned by diff to source.

    Returns a str if source is one, otherwise a list.
    """
    result: List[Any] = []
    i = 0
    def copy_until(end: int) -> None:
        nonlocal i
        if not i <= end <= len(source):
            raise ValueError(f'cannot copy source[{i}:{end}]')
        result.extend(source[i:end])
        i = end
    for change in reversed(script):
        if isinstance(change, Insertion):
            copy_until(i + change.position - len(result))
            result.append(change.char)
            continue
        copy_until(change.position)
        if i >= len(source):
            raise ValueError(f'{change!r} is past the end of the source')
        if isinstance(change, Deletion):
            expected = change.char
        else:
            expected = change.old
            result.append(change.new)
        if source[i] != expected:
            raise ValueError(
                f'{change!r} expects {expected!r} but source has {source[i]!r}'
            )
        i += 1
    copy_until(len(source))
    if isinstance(source, str):
        return ''.join(result)
    return result
