import logging

import cv2
import numpy as np

from .. import config
from ..errors import ComparatorFailure, InvalidInput

logger = logging.getLogger(__name__)

DEFAULT_SIZE_IN_BYTES = 128

# Heat map is HEAT_MAP_SIZE x HEAT_MAP_SIZE cells, hashed in BLOCK_SIZE blocks
HEAT_MAP_SIZE = 32
BLOCK_SIZE = 4

_MASK64 = (1 << 64) - 1

# Bit-reversal of every 4-bit value
_NIBBLE_REVERSE = np.array(
    [0, 8, 4, 12, 2, 10, 6, 14, 1, 9, 5, 13, 3, 11, 7, 15], dtype=np.uint16
)


def marr_wavelet_mask(sigma):
    """
    Build the correlation mask of a Marr (Mexican hat) wavelet

    Args:
        sigma: Wavelet scale in pixels

    Returns:
        (8*sigma+1) square float32 mask
    """
    coords = (np.arange(8 * sigma + 1, dtype=np.float32) - 4 * sigma) / sigma
    x, y = np.meshgrid(coords, coords)
    r2 = x * x + y * y
    return ((2.0 - r2) * np.exp(-0.5 * r2)).astype(np.float32)


def _standard_dimension(width, height):
    """Largest standard square size both sides of the image reach"""
    for dim in (512, 256, 128, 64):
        if width >= dim and height >= dim:
            return dim
    return 32


def _to_grayscale(img, image_path):
    """Reduce any OpenCV image to a single 8-bit channel"""
    # 16-bit and float images are rescaled into 8 bits first
    if img.dtype == np.uint16:
        img = (img >> 8).astype(np.uint8)
    elif img.dtype != np.uint8:
        img = cv2.normalize(img, None, 0, 255, cv2.NORM_MINMAX).astype(np.uint8)

    if img.ndim == 2:
        return img
    channels = img.shape[2]
    if channels == 1:
        return img[:, :, 0]
    if channels == 3:
        return cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)
    if channels == 4:
        # Luminance only, the alpha channel is ignored
        return cv2.cvtColor(img, cv2.COLOR_BGRA2GRAY)
    raise ComparatorFailure(f"Unsupported channel count {channels}: {image_path}")


def compute_image_hash(image_path, wavelet_scale_base=2, wavelet_scale_exponent=1):
    """
    Compute the Marr wavelet hash words of an image file

    Args:
        image_path: Path of the image to read
        wavelet_scale_base: Base of the wavelet scale
        wavelet_scale_exponent: Exponent of the wavelet scale (sigma = base ** exponent)

    Returns:
        uint16 array of 64 words, one per 4x4 block of the heat map
    """
    if wavelet_scale_exponent < 0:
        raise InvalidInput(f"wavelet_scale_exponent must be >= 0, got {wavelet_scale_exponent}")

    img = cv2.imread(str(image_path), cv2.IMREAD_UNCHANGED)
    if img is None or img.size == 0:
        raise ComparatorFailure(f"Invalid image: {image_path}")

    gray = _to_grayscale(img, image_path)
    height, width = gray.shape
    resize_dim = _standard_dimension(width, height)

    # Standardize size, then smooth away compression noise
    resized = cv2.resize(gray, (resize_dim, resize_dim), interpolation=cv2.INTER_CUBIC)
    blurred = np.float32(resized)
    for _ in range(3):
        blurred = cv2.GaussianBlur(blurred, (0, 0), 1.0)

    # Wavelet decomposition (filter2D correlates, it does not convolve)
    sigma = wavelet_scale_base ** wavelet_scale_exponent
    filtered = cv2.filter2D(blurred, cv2.CV_32F, marr_wavelet_mask(sigma),
                            borderType=cv2.BORDER_REPLICATE)

    # Downscale the sparse response into a heat map
    cell = filtered.shape[0] // HEAT_MAP_SIZE
    trimmed = filtered[:cell * HEAT_MAP_SIZE, :cell * HEAT_MAP_SIZE]
    heat_map = trimmed.reshape(HEAT_MAP_SIZE, cell, HEAT_MAP_SIZE, cell).sum(axis=(1, 3))

    return _hash_heat_map(heat_map)


def _hash_heat_map(heat_map):
    blocks_per_axis = HEAT_MAP_SIZE // BLOCK_SIZE
    words = np.zeros(blocks_per_axis * blocks_per_axis, dtype=np.uint16)
    index = 0
    for block_col in range(blocks_per_axis):
        for block_row in range(blocks_per_axis):
            block = heat_map[block_row * BLOCK_SIZE:(block_row + 1) * BLOCK_SIZE,
                             block_col * BLOCK_SIZE:(block_col + 1) * BLOCK_SIZE].reshape(-1)
            # One bit per cell, set when above the block average
            word = 0
            for above in block > block.mean():
                word = (word << 1) | int(above)
            words[index] = word
            index += 1
    return words


class MwisdFingerprint:
    """
    Marr wavelet (image sequence discriminating) fingerprint

    Holds size_in_bytes // 2 unsigned 16-bit words; with the default size
    each word is one 4x4 block of the wavelet heat map, so visually similar
    images differ in few bits. Instances never change once built: transforms
    return new fingerprints.
    """

    def __init__(self, contents=None, size_in_bytes=DEFAULT_SIZE_IN_BYTES):
        """
        Args:
            contents: Sequence of ints; truncated or zero-padded to capacity
            size_in_bytes: Fingerprint size (128 gives 64 words / 1024 bits)
        """
        if isinstance(size_in_bytes, bool) or not isinstance(size_in_bytes, int) or size_in_bytes < 2:
            raise InvalidInput(f"size_in_bytes must be an int >= 2, got {size_in_bytes!r}")

        words = np.zeros(size_in_bytes // 2, dtype=np.uint16)
        if contents is not None:
            values = np.asarray(contents).reshape(-1)
            if values.size and values.dtype.kind not in 'ui':
                raise ComparatorFailure(f"Fingerprint contents must be integers, got {values.dtype}")
            count = min(len(words), len(values))
            words[:count] = values[:count].astype(np.uint16)

        words.flags.writeable = False
        self._words = words
        self._size_in_bytes = size_in_bytes

    @classmethod
    def from_samples(cls, values, size_in_bytes=DEFAULT_SIZE_IN_BYTES):
        return cls(values, size_in_bytes)

    @classmethod
    def from_image_file(cls, image_path, wavelet_scale_base=None, wavelet_scale_exponent=None):
        """Compute the fingerprint of an image file (recommended scale: base 2, exponent 1)"""
        if wavelet_scale_base is None:
            wavelet_scale_base = config.WAVELET_SCALE_BASE
        if wavelet_scale_exponent is None:
            wavelet_scale_exponent = config.WAVELET_SCALE_EXPONENT
        words = compute_image_hash(image_path, wavelet_scale_base, wavelet_scale_exponent)
        return cls(words)

    @classmethod
    def from_bytes(cls, data, size_in_bytes=DEFAULT_SIZE_IN_BYTES):
        """Rebuild a fingerprint from little-endian words, as written by as_bytes()"""
        try:
            words = np.frombuffer(data, dtype='<u2')
        except ValueError as e:
            raise ComparatorFailure(f"Malformed fingerprint bytes: {e}") from e
        return cls(words, size_in_bytes)

    @classmethod
    def from_text(cls, text, size_in_bytes=DEFAULT_SIZE_IN_BYTES):
        """Parse whitespace separated words, as printed by as_text()"""
        try:
            values = [int(token) for token in text.split()]
        except ValueError as e:
            raise ComparatorFailure(f"Malformed fingerprint text: {e}") from e
        if len(values) < size_in_bytes // 2:
            logger.warning("Fingerprint text shorter than expected (%d of %d words)",
                           len(values), size_in_bytes // 2)
        return cls(values, size_in_bytes)

    @property
    def size_in_bytes(self):
        return self._size_in_bytes

    @property
    def words(self):
        return self._words

    @property
    def bits(self):
        # Odd sizes hold one byte fewer than requested
        return len(self._words) * 16

    def as_int_array(self):
        return self._words.tolist()

    def as_bytes(self):
        return self._words.astype('<u2').tobytes()

    def as_text(self):
        return ''.join('%5u ' % word for word in self._words)

    def compare(self, other):
        """
        Similarity to another fingerprint

        Returns:
            1 - normalized Hamming distance; exactly 1.0 for identical contents
        """
        if not isinstance(other, MwisdFingerprint):
            raise ComparatorFailure(f"Cannot compare fingerprint with {type(other).__name__}")
        if other._size_in_bytes != self._size_in_bytes:
            raise ComparatorFailure(
                f"Fingerprint sizes differ: {self._size_in_bytes} != {other._size_in_bytes}")

        xor_result = np.bitwise_xor(self._words, other._words)
        hamming_distance = int(np.unpackbits(xor_result.view(np.uint8)).sum())
        return 1.0 - hamming_distance / float(self.bits)

    def compressed_hash(self):
        """
        64-bit summary: one bit per word, set when the word is above the mean

        Cheap pre-filter before a full comparison or tree search.
        """
        words = self._words.astype(np.int64)
        average = int(words.sum()) // len(words)
        hash_value = 0
        for above in words > average:
            hash_value = (hash_value << 1) | int(above)
        return hash_value & _MASK64

    def compare_compressed_hash(self, other_hash):
        """Number of differing bits between compressed hashes"""
        return bin((self.compressed_hash() ^ int(other_hash)) & _MASK64).count('1')

    def mirrored(self):
        """Fingerprint of the horizontally flipped image, computed without the image"""
        words = self._words.copy()

        # Reverse the order of block columns
        blocks_per_axis = int(np.sqrt(len(words)) + 0.001)
        square = blocks_per_axis * blocks_per_axis
        grid = words[:square].reshape(blocks_per_axis, blocks_per_axis)
        words[:square] = grid[::-1].reshape(-1)

        # Mirror each 4-cell row within its block
        flipped = np.zeros_like(words)
        for shift in (0, 4, 8, 12):
            flipped |= _NIBBLE_REVERSE[(words >> shift) & 0xF] << shift

        return MwisdFingerprint(flipped, self._size_in_bytes)

    def __eq__(self, other):
        if not isinstance(other, MwisdFingerprint):
            return NotImplemented
        return (self._size_in_bytes == other._size_in_bytes
                and np.array_equal(self._words, other._words))

    def __hash__(self):
        return hash((self._size_in_bytes, self._words.tobytes()))

    def __repr__(self):
        return f"MwisdFingerprint(size_in_bytes={self._size_in_bytes}, compressed_hash={self.compressed_hash():#018x})"


def compare_with_mirror(fingerprint_1, fingerprint_2):
    """
    Compare two fingerprints, allowing one to be the mirror of the other

    Returns:
        The similarity, or the negated mirror similarity when the mirror
        of fingerprint_2 is at least as close
    """
    similarity = fingerprint_1.compare(fingerprint_2)
    mirror_similarity = fingerprint_1.compare(fingerprint_2.mirrored())
    if similarity > mirror_similarity:
        return similarity
    return -mirror_similarity
