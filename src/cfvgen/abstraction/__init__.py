"""Card abstraction and conversion between hand and bucket vectors."""

from cfvgen.abstraction.bucketer import Bucketer, NO_BUCKET
from cfvgen.abstraction.bucket_conversion import BucketConversion, BoardBuckets

__all__ = ['Bucketer', 'NO_BUCKET', 'BucketConversion', 'BoardBuckets']
