"""s3gate: SigV4-signed S3 storage client and its HTTP JSON boundary."""
