"""
Services package for the XMLTV converter

This package contains the ingest, image resolution, packing and serialization stages.
"""
from xmltv_converter.services.image_resolver_service import ImageFetcher, ImageResolver, cache_key
from xmltv_converter.services.mosaic_service import MosaicPacker
from xmltv_converter.services.replacement_service import Replacement, ReplacementRegistry, load_replacements
from xmltv_converter.services.schedule_serializer_service import build_schedule, render_schedule_json
from xmltv_converter.services.xmltv_parser_service import ingest_guide, load_xmltv_document
from xmltv_converter.utils.file_operations import HttpImageFetcher

__all__ = [
    'HttpImageFetcher',
    'ImageFetcher',
    'ImageResolver',
    'cache_key',
    'MosaicPacker',
    'Replacement',
    'ReplacementRegistry',
    'load_replacements',
    'build_schedule',
    'render_schedule_json',
    'ingest_guide',
    'load_xmltv_document',
]
