import logging

import cv2
import numpy as np

from ..errors import ComparatorFailure, InvalidInput

logger = logging.getLogger(__name__)

DEFAULT_BINS_PER_BAND = 4


def compute_image_histogram(image_path, bins_per_band=DEFAULT_BINS_PER_BAND):
    """
    Compute a normalized 3D colour histogram using OpenCV

    Args:
        image_path: Path of a three-channel colour image
        bins_per_band: Number of bins along each of the R, G and B axes

    Returns:
        float32 array of bins_per_band**3 values summing to ~1, indexed
        (r * bins + g) * bins + b
    """
    if bins_per_band < 2:
        raise InvalidInput(f"Must request 2 or more bins per band, got {bins_per_band}")

    img = cv2.imread(str(image_path), cv2.IMREAD_UNCHANGED)
    if img is None or img.size == 0:
        raise ComparatorFailure(f"Invalid image: {image_path}")
    if img.ndim != 3 or img.shape[2] != 3:
        raise ComparatorFailure(f"Image is not three-channel colour: {image_path}")

    # Histogram ranges follow the pixel bit depth
    upper = 65536 if img.dtype == np.uint16 else 256
    rgb = cv2.cvtColor(img, cv2.COLOR_BGR2RGB)
    hist = cv2.calcHist([rgb], [0, 1, 2], None,
                        [bins_per_band] * 3, [0, upper] * 3).flatten()

    return (hist / (hist.sum() + 0.0000000001)).astype(np.float32)


class HistogramFingerprint:
    """
    Multi-band colour histogram fingerprint

    Coarser than the wavelet fingerprint: groups images by colour
    distribution rather than structure.
    """

    def __init__(self, contents=None, bins_per_band=DEFAULT_BINS_PER_BAND):
        if bins_per_band < 2:
            raise InvalidInput(f"Must request 2 or more bins per band, got {bins_per_band}")
        values = np.zeros(bins_per_band ** 3, dtype=np.float32)
        if contents is not None:
            samples = np.asarray(contents, dtype=np.float32).reshape(-1)
            count = min(len(values), len(samples))
            values[:count] = samples[:count]
        self._values = values
        self.bins_per_band = bins_per_band

    @classmethod
    def from_samples(cls, values, bins_per_band=DEFAULT_BINS_PER_BAND):
        return cls(values, bins_per_band)

    @classmethod
    def from_image_file(cls, image_path, bins_per_band=DEFAULT_BINS_PER_BAND):
        return cls(compute_image_histogram(image_path, bins_per_band), bins_per_band)

    @classmethod
    def from_bytes(cls, data, bins_per_band=DEFAULT_BINS_PER_BAND):
        try:
            values = np.frombuffer(data, dtype='<f4')
        except ValueError as e:
            raise ComparatorFailure(f"Malformed histogram bytes: {e}") from e
        return cls(values, bins_per_band)

    @classmethod
    def from_text(cls, text, bins_per_band=DEFAULT_BINS_PER_BAND):
        try:
            values = [float(token) for token in text.split()]
        except ValueError as e:
            raise ComparatorFailure(f"Malformed histogram text: {e}") from e
        if len(values) < bins_per_band ** 3:
            logger.warning("Histogram text shorter than expected (%d of %d bins)",
                           len(values), bins_per_band ** 3)
        return cls(values, bins_per_band)

    def as_float_array(self):
        return self._values.tolist()

    def as_bytes(self):
        return self._values.astype('<f4').tobytes()

    def as_text(self):
        return ''.join('%9.7f ' % value for value in self._values)

    def chi_square(self, other):
        """Symmetric chi-square distance, 0.0 for identical histograms"""
        if not isinstance(other, HistogramFingerprint):
            raise ComparatorFailure(f"Cannot compare histogram with {type(other).__name__}")
        if other.bins_per_band != self.bins_per_band:
            raise ComparatorFailure(
                f"Histogram sizes differ: {self.bins_per_band} != {other.bins_per_band}")
        # CHISQR_ALT is 2 * sum((a - b)^2 / (a + b))
        return cv2.compareHist(self._values, other._values, cv2.HISTCMP_CHISQR_ALT) / 2.0

    def compare(self, other):
        """
        Similarity between 0 and 1 (higher is more similar)

        Chi-square is lower-is-better, so it is mapped onto a 0-1 scale.
        """
        return 1.0 / (1.0 + self.chi_square(other))

    def __eq__(self, other):
        if not isinstance(other, HistogramFingerprint):
            return NotImplemented
        return (self.bins_per_band == other.bins_per_band
                and np.array_equal(self._values, other._values))

    def __hash__(self):
        return hash((self.bins_per_band, self._values.tobytes()))

    def __repr__(self):
        return f"HistogramFingerprint(bins_per_band={self.bins_per_band})"
