"""
Persistent client example using fluent_http.

This example demonstrates connection reuse across requests to one host,
reconnection on host switch, and streaming a response body.
"""

import logging

from fluent_http import Client, FluentHTTPError, PersistentEOFError

# Configure logging
logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)


def keep_alive_demo(client: Client):
    """Demonstrate keep-alive with multiple requests."""
    logger.info("Demonstrating keep-alive with multiple requests...")

    response1 = client.request("http://httpbin.org/get", "GET")
    logger.info(f"First response: {response1.status_code}")
    response1.read()
    first_connection = client.connection

    response2 = client.request(
        "http://httpbin.org/post",
        "POST",
        headers={"Content-Type": "text/plain"},
        body="second request",
    )
    logger.info(f"Second response: {response2.status_code}")
    response2.read()

    logger.info(f"Connection reused: {client.connection is first_connection}")
    logger.info(f"Connection metrics: {client.connection.metrics}")


def host_switch_demo(client: Client):
    """Demonstrate that a new host gets a new connection."""
    logger.info("Switching host...")

    try:
        response = client.request("http://example.com/", "GET")
    except PersistentEOFError as e:
        # The server closes after this response; it is still complete.
        response = e.response

    with response:
        logger.info(f"Response from {client.last_url.host}: {response.status_code}")


def streaming_response_demo(client: Client):
    """Demonstrate streaming response handling."""
    logger.info("Demonstrating streaming response...")

    response = client.request("http://httpbin.org/bytes/10000", "GET")

    total_bytes = 0
    chunk_count = 0
    for chunk in response.iter_bytes():
        total_bytes += len(chunk)
        chunk_count += 1

    logger.info(f"Streaming complete: {total_bytes} bytes in {chunk_count} chunks")


def main():
    """Run all examples."""
    with Client() as client:
        try:
            keep_alive_demo(client)
            host_switch_demo(client)
            streaming_response_demo(client)
        except FluentHTTPError as e:
            logger.error(f"Example failed: {e}")
            raise


if __name__ == "__main__":
    main()
