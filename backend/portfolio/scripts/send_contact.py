import argparse
import os
import sys
from typing import List, Optional

from portfolio.lib.submission_client import ContactForm, SubmissionClient, SubmitStatus

DEFAULT_ENDPOINT = os.getenv("CONTACT_ENDPOINT", "http://localhost:8000/api/send")


def _parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Submit the portfolio contact form from the command line.")
    p.add_argument("--endpoint", default=DEFAULT_ENDPOINT)
    p.add_argument("--timeout", type=float, default=10.0)
    p.add_argument("--name", required=True)
    p.add_argument("--email", required=True)
    p.add_argument("--subject", required=True)
    p.add_argument("--message", required=True)
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = _parser().parse_args(argv)
    client = SubmissionClient(args.endpoint, timeout=args.timeout)
    form = ContactForm(client).fill(
        name=args.name, email=args.email, subject=args.subject, message=args.message
    )
    try:
        status = form.submit()
    finally:
        client.close()

    if status is SubmitStatus.INVALID:
        for field, msg in form.errors.items():
            print(f"{field}: {msg}", file=sys.stderr)
        return 2
    print(f"{form.notification.title}: {form.notification.description}")
    return 0 if status is SubmitStatus.SENT else 1


if __name__ == "__main__":
    sys.exit(main())
