"""
Fluent builder example using fluent_http.

This example demonstrates the get/post/put/delete builders and the
four ways of collecting a response.
"""

import logging
import tempfile
import os

from fluent_http import ClientConfig, FluentHTTPError, get, post, put, delete

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def query_string_request():
    """Demonstrate a GET with query parameters."""
    logger.info("Making GET request with params...")

    body = (
        get("http://httpbin.org/get")
        .set_header("Accept", "application/json")
        .set_param("q", "fluent http")
        .set_param("page", "1")
        .as_string()
    )
    logger.info(f"Response body length: {len(body)} characters")


def form_post_request():
    """Demonstrate a POST whose params become a form body."""
    logger.info("Making form POST request...")

    response = post("http://httpbin.org/post").set_param("user", "bob").as_response()
    with response:
        logger.info(f"Response status: {response.status_code}")
        logger.info(f"Response body: {response.text()[:80]}...")


def raw_body_request():
    """Demonstrate PUT and DELETE with explicit bodies and debug output."""
    logger.info("Making PUT request with debug dump...")

    data = (
        put("http://httpbin.org/put", config=ClientConfig(debug=True))
        .set_header("Content-Type", "application/json")
        .set_body('{"message": "Hello, World!"}')
        .as_bytes()
    )
    if b"Hello, World!" in data:
        logger.info("Our data was received by the server")

    delete("http://httpbin.org/delete").as_bytes()


def download_to_file():
    """Demonstrate writing a response straight to disk."""
    logger.info("Downloading to a file...")

    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "bytes.bin")
        get("http://httpbin.org/bytes/10000").as_file(path)
        logger.info(f"Wrote {os.path.getsize(path)} bytes to {path}")


def main():
    """Run all examples."""
    logger.info("Starting builder examples...")

    try:
        query_string_request()
        form_post_request()
        raw_body_request()
        download_to_file()
    except FluentHTTPError as e:
        logger.error(f"Example failed: {e}")
        raise

    logger.info("All examples completed successfully!")


if __name__ == "__main__":
    main()
