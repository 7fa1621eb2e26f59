"""
Utility functions for feature extraction.
Generator pattern for extracting features from many images.
"""
from typing import Generator, Iterable, Optional, Sequence
import numpy as np
from tqdm import tqdm


def feature_generator(images: Iterable[np.ndarray], extractor) -> Generator[np.ndarray, None, None]:
    """
    Generator that extracts features one image at a time.

    Args:
        images: Iterable of grayscale images
        extractor: Object with an extract(image) method

    Yields:
        Feature vector for each image
    """
    for image in images:
        yield extractor.extract(image)


def extract_feature_matrix(images: Sequence[np.ndarray],
                           extractor,
                           show_progress: bool = True,
                           desc: Optional[str] = "Extracting LBP") -> np.ndarray:
    """
    Extract features for a list of images into a row matrix.

    Args:
        images: Grayscale images
        extractor: Feature extractor (e.g. LBPExtractor)
        show_progress: Show a tqdm progress bar
        desc: Progress bar description

    Returns:
        Feature matrix (num_images, feature_dim), float32
    """
    features = np.zeros((len(images), extractor.get_feature_dim()), dtype=np.float32)
    for idx, feat in enumerate(tqdm(feature_generator(images, extractor),
                                    total=len(images), desc=desc,
                                    disable=not show_progress)):
        features[idx] = feat
    return features
