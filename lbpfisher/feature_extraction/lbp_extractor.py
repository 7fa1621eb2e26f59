"""
LBP (Local Binary Patterns) feature extractor.
Extracts texture information from grayscale images.

Operators:
    olbp   - original 3x3 LBP (Ahonen, Hadid and Pietikainen, "Face description
             with local binary patterns", IEEE TPAMI 28(12), 2006)
    elbp   - extended (circular) LBP with bilinear interpolation
    varlbp - variance-based LBP without quantization (Pietikainen et al.,
             "Computer Vision Using Local Binary Patterns", Springer 2011)
"""
import math
from typing import Dict
import numpy as np

from lbpfisher.errors import ArgumentError, UnsupportedElementType
from lbpfisher.preprocess.utils import check_single_channel
from lbpfisher.feature_extraction.spatial_histogram import spatial_histogram


# Element type -> type the sampled values are compared in. Integer and
# float32 images are compared against float32 interpolated values, float64
# images in double precision.
SUPPORTED_DTYPES: Dict[np.dtype, type] = {
    np.dtype(np.int8): np.float32,
    np.dtype(np.uint8): np.float32,
    np.dtype(np.int16): np.float32,
    np.dtype(np.uint16): np.float32,
    np.dtype(np.int32): np.float32,
    np.dtype(np.float32): np.float32,
    np.dtype(np.float64): np.float64,
}

FLOAT_EPS = np.finfo(np.float32).eps

# extended codes are int32 with one bit per neighbor
MAX_ELBP_NEIGHBORS = 31

# (row offset, column offset, bit) for the original operator, clockwise from NW
_OLBP_NEIGHBORS = (
    (-1, -1, 7),
    (-1, 0, 6),
    (-1, 1, 5),
    (0, 1, 4),
    (1, 1, 3),
    (1, 0, 2),
    (1, -1, 1),
    (0, -1, 0),
)


def _working_type(src: np.ndarray, operator: str) -> type:
    try:
        return SUPPORTED_DTYPES[src.dtype]
    except KeyError:
        supported = ", ".join(str(dt) for dt in SUPPORTED_DTYPES)
        raise UnsupportedElementType(
            f"{operator}: element type {src.dtype} is not supported (supported: {supported})"
        ) from None


def _check_sampling(radius: int, neighbors: int, operator: str) -> None:
    if radius < 1:
        raise ArgumentError(f"{operator}: radius must be >= 1, got {radius}")
    if neighbors < 1:
        raise ArgumentError(f"{operator}: neighbors must be >= 1, got {neighbors}")


def _check_elbp_neighbors(neighbors: int, operator: str = "elbp") -> None:
    if neighbors > MAX_ELBP_NEIGHBORS:
        raise ArgumentError(
            f"{operator}: at most {MAX_ELBP_NEIGHBORS} neighbors fit an int32 code, got {neighbors}"
        )


def _check_varlbp_neighbors(neighbors: int, operator: str = "varlbp") -> None:
    if neighbors < 2:
        raise ArgumentError(f"{operator}: the sample variance needs >= 2 neighbors, got {neighbors}")


def _shrunk_shape(src: np.ndarray, border: int):
    return max(src.shape[0] - 2 * border, 0), max(src.shape[1] - 2 * border, 0)


def _sample_point(x: np.float32, y: np.float32):
    """
    Integer lattice offsets and bilinear weights for a sample at (x, y).

    x is the column offset and y the row offset relative to the center.
    """
    one = np.float32(1.0)
    fx, fy = int(math.floor(x)), int(math.floor(y))
    cx, cy = int(math.ceil(x)), int(math.ceil(y))
    tx = np.float32(x - np.float32(fx))
    ty = np.float32(y - np.float32(fy))
    weights = (
        (one - tx) * (one - ty),
        tx * (one - ty),
        (one - tx) * ty,
        tx * ty,
    )
    return (fx, fy, cx, cy), weights


def _interpolate(src: np.ndarray, radius: int, offsets, weights, work: type) -> np.ndarray:
    """Bilinearly interpolated sample for every interior pixel, as float32."""
    rows, cols = src.shape
    fx, fy, cx, cy = offsets

    def shifted(dy, dx):
        return src[radius + dy:rows - radius + dy, radius + dx:cols - radius + dx].astype(work)

    w1, w2, w3, w4 = (work(w) for w in weights)
    t = (w1 * shifted(fy, fx) + w2 * shifted(fy, cx)
         + w3 * shifted(cy, fx) + w4 * shifted(cy, cx))
    return t.astype(np.float32)


def olbp(src: np.ndarray) -> np.ndarray:
    """
    Original Local Binary Patterns.

    Each of the 8 neighbors contributes a 1 bit when it is >= the center.
    Bit order: NW=7, N=6, NE=5, E=4, SE=3, S=2, SW=1, W=0.

    Args:
        src: 2-D grayscale image

    Returns:
        uint8 code map of shape (rows-2, cols-2)
    """
    src = check_single_channel(src, "LBP source")
    _working_type(src, "olbp")

    dst = np.zeros(_shrunk_shape(src, 1), dtype=np.uint8)
    if dst.size == 0:
        return dst

    rows, cols = src.shape
    center = src[1:rows - 1, 1:cols - 1]
    for dy, dx, bit in _OLBP_NEIGHBORS:
        neighbor = src[1 + dy:rows - 1 + dy, 1 + dx:cols - 1 + dx]
        dst |= (neighbor >= center).astype(np.uint8) << np.uint8(bit)
    return dst


def elbp(src: np.ndarray, radius: int = 1, neighbors: int = 8) -> np.ndarray:
    """
    Extended (circular) Local Binary Patterns.

    Samples `neighbors` points on a circle of `radius` around every pixel.
    Bit n is set when the interpolated sample is greater than the center or
    equal to it within float32 machine epsilon.

    Args:
        src: 2-D grayscale image
        radius: Circle radius in pixels (>= 1)
        neighbors: Number of sample points (1..31)

    Returns:
        int32 code map of shape (rows-2*radius, cols-2*radius)
    """
    src = check_single_channel(src, "LBP source")
    work = _working_type(src, "elbp")
    _check_sampling(radius, neighbors, "elbp")
    _check_elbp_neighbors(neighbors)

    dst = np.zeros(_shrunk_shape(src, radius), dtype=np.int32)
    if dst.size == 0:
        return dst

    rows, cols = src.shape
    center = src[radius:rows - radius, radius:cols - radius].astype(work)
    for n in range(neighbors):
        angle = 2.0 * math.pi * n / float(neighbors)
        x = np.float32(-float(radius) * math.sin(angle))
        y = np.float32(float(radius) * math.cos(angle))
        offsets, weights = _sample_point(x, y)
        t = _interpolate(src, radius, offsets, weights, work).astype(work)
        bit = (t > center) | (np.abs(t - center) < FLOAT_EPS)
        dst += bit.astype(np.int32) << np.int32(n)
    return dst


def varlbp(src: np.ndarray, radius: int = 1, neighbors: int = 8) -> np.ndarray:
    """
    Variance-based Local Binary Patterns (without quantization).

    Computes the sample variance of the interpolated circle samples around
    every pixel with Welford's online algorithm.

    Args:
        src: 2-D grayscale image
        radius: Circle radius in pixels (>= 1)
        neighbors: Number of sample points (>= 2)

    Returns:
        float32 texture energy map of shape (rows-2*radius, cols-2*radius)
    """
    src = check_single_channel(src, "LBP source")
    work = _working_type(src, "varlbp")
    _check_sampling(radius, neighbors, "varlbp")
    _check_varlbp_neighbors(neighbors)

    shape = _shrunk_shape(src, radius)
    if shape[0] == 0 or shape[1] == 0:
        return np.zeros(shape, dtype=np.float32)

    mean = np.zeros(shape, dtype=np.float32)
    m2 = np.zeros(shape, dtype=np.float32)
    for n in range(neighbors):
        angle = 2.0 * math.pi * n / float(neighbors)
        x = np.float32(float(radius) * math.cos(angle))
        y = np.float32(float(radius) * -math.sin(angle))
        offsets, weights = _sample_point(x, y)
        t = _interpolate(src, radius, offsets, weights, work)
        delta = t - mean
        mean = (mean + delta / (n + 1.0)).astype(np.float32)
        m2 = m2 + delta * (t - mean)
    return (m2 / (neighbors - 1.0)).astype(np.float32)


class LBPExtractor:
    """
    LBP histogram feature extractor.

    Runs one of the LBP operators over a grayscale image and aggregates the
    descriptor map into a spatial histogram (one histogram per grid cell).
    """

    METHODS = ('original', 'extended', 'variance')

    def __init__(self,
                 method: str = 'extended',
                 radius: int = 1,
                 neighbors: int = 8,
                 grid_x: int = 8,
                 grid_y: int = 8,
                 normed: bool = True,
                 variance_bins: int = 16,
                 variance_scale: float = 1.0):
        """
        Initialize LBP extractor.

        Args:
            method: Operator to use ('original', 'extended', 'variance')
            radius: Radius of circle (in pixels), circular operators only
            neighbors: Number of circularly symmetric neighbor set points
            grid_x: Number of histogram cells along the columns
            grid_y: Number of histogram cells along the rows
            normed: Whether each cell histogram is L1 normalized
            variance_bins: Number of bins for quantized variance maps
            variance_scale: Width of one variance bin
        """
        if method not in self.METHODS:
            raise ValueError(f"Unknown LBP method: {method}")
        # reject operator limits here, before feature_dim sizes any buffers
        operator = f"LBPExtractor({method})"
        if method != 'original':
            _check_sampling(radius, neighbors, operator)
        if method == 'extended':
            _check_elbp_neighbors(neighbors, operator)
        elif method == 'variance':
            _check_varlbp_neighbors(neighbors, operator)
        if grid_x < 1 or grid_y < 1:
            raise ArgumentError(f"Grid must be at least 1x1, got {grid_x}x{grid_y}")
        if variance_bins < 1 or variance_scale <= 0:
            raise ArgumentError("variance_bins must be >= 1 and variance_scale > 0")

        self.method = method
        self.radius = radius
        self.neighbors = neighbors
        self.grid_x = grid_x
        self.grid_y = grid_y
        self.normed = normed
        self.variance_bins = variance_bins
        self.variance_scale = variance_scale

        # Number of distinct codes the operator can produce
        if method == 'original':
            self.num_patterns = 256
        elif method == 'extended':
            self.num_patterns = 2 ** neighbors
        else:
            self.num_patterns = variance_bins

        self.feature_dim = grid_x * grid_y * self.num_patterns

    def compute_map(self, image: np.ndarray) -> np.ndarray:
        """Run the configured operator and return the raw descriptor map."""
        if self.method == 'original':
            return olbp(image)
        if self.method == 'extended':
            return elbp(image, self.radius, self.neighbors)
        return varlbp(image, self.radius, self.neighbors)

    def quantize_variance(self, var_map: np.ndarray) -> np.ndarray:
        """Map a variance map onto integer bins [0, variance_bins-1]."""
        codes = np.floor(var_map / self.variance_scale)
        return np.clip(codes, 0, self.variance_bins - 1).astype(np.int32)

    def extract(self, image: np.ndarray) -> np.ndarray:
        """
        Extract LBP features from image.

        Args:
            image: 2-D grayscale image of a supported element type

        Returns:
            Spatial LBP histogram (float32) of length get_feature_dim()
        """
        lbp = self.compute_map(image)
        if self.method == 'variance':
            lbp = self.quantize_variance(lbp)
        return spatial_histogram(lbp, self.num_patterns,
                                 grid_x=self.grid_x, grid_y=self.grid_y,
                                 normed=self.normed)

    def get_feature_dim(self) -> int:
        """Get feature dimension."""
        return self.feature_dim


def create_extractor_from_config(config: Dict) -> LBPExtractor:
    """
    Build an LBPExtractor from the 'features.lbp' section of a config.

    Args:
        config: Configuration dictionary (see config/config.yaml)

    Returns:
        Configured LBPExtractor
    """
    lbp_config = (config or {}).get('features', {}).get('lbp', {})
    return LBPExtractor(
        method=lbp_config.get('method', 'extended'),
        radius=lbp_config.get('radius', 1),
        neighbors=lbp_config.get('neighbors', 8),
        grid_x=lbp_config.get('grid_x', 8),
        grid_y=lbp_config.get('grid_y', 8),
        normed=lbp_config.get('normed', True),
        variance_bins=lbp_config.get('variance_bins', 16),
        variance_scale=lbp_config.get('variance_scale', 1.0)
    )
