#!/usr/bin/env python3
import argparse
import json
import logging
import sys
import os

# Add the current directory to sys.path to ensure imports work correctly
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from botocore.exceptions import BotoCoreError, ClientError
from config import settings
from infra.storage.object_storage import S3BackupStorage

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

def build_public_read_policy(bucket_name: str) -> dict:
    return {
        "Version": "2012-10-17",
        "Statement": [
            {
                "Sid": "PublicReadGetObject",
                "Effect": "Allow",
                "Principal": "*",
                "Action": "s3:GetObject",
                "Resource": f"arn:aws:s3:::{bucket_name}/*"
            }
        ]
    }

def setup_bucket(storage: S3BackupStorage) -> bool:
    """
    バケットを公開読み取り用に設定する。
    ACLはブロックしたまま、バケットポリシーによる公開のみを許可する。
    """
    bucket_name = storage.bucket_name
    policy = build_public_read_policy(bucket_name)

    try:
        logger.info(f"Configuring public access block for bucket: {bucket_name}")
        storage.client.put_public_access_block(
            Bucket=bucket_name,
            PublicAccessBlockConfiguration={
                "BlockPublicAcls": True,
                "IgnorePublicAcls": True,
                "BlockPublicPolicy": False,
                "RestrictPublicBuckets": False
            }
        )

        logger.info("Applying public read bucket policy...")
        storage.client.put_bucket_policy(Bucket=bucket_name, Policy=json.dumps(policy))
        logger.info("Bucket setup completed successfully.")
        return True
    except (ClientError, BotoCoreError) as e:
        logger.error(f"Error setting up bucket: {e}")
        logger.info("Apply the following policy manually (Permissions > Bucket policy):")
        print(json.dumps(policy, indent=2))
        return False

def main(argv=None):
    parser = argparse.ArgumentParser(description="Configure the backup bucket for public read access.")
    parser.add_argument("--bucket", default=settings.S3_BUCKET_NAME, help="Bucket name (default: S3_BUCKET_NAME)")
    parser.add_argument("--dry-run", action="store_true", help="Only print the bucket policy")
    args = parser.parse_args(argv)

    if not args.bucket:
        logger.error("No bucket given. Set S3_BUCKET_NAME or pass --bucket.")
        return 1

    if args.dry_run:
        print(json.dumps(build_public_read_policy(args.bucket), indent=2))
        return 0

    storage = S3BackupStorage(bucket_name=args.bucket)
    return 0 if setup_bucket(storage) else 1

if __name__ == "__main__":
    sys.exit(main())
