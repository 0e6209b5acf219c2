"""Allow running as: python -m oci_bom"""

import argparse

from oci_bom.main import run, serve
from oci_bom.models.enums import LLMProvider


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate an OCI bill of materials from requirements text")
    parser.add_argument("requirements", nargs="?", default="", help="Requirements text")
    parser.add_argument("--serve", action="store_true", help="Start the API server instead")
    parser.add_argument(
        "--provider",
        choices=[p.value for p in LLMProvider],
        default=LLMProvider.OPENAI.value,
        help="Completion provider for draft generation",
    )
    parser.add_argument("--output", default=None, help="Write the workbook to this path")
    args = parser.parse_args()

    if args.serve:
        serve()
        return
    if not args.requirements.strip():
        parser.error("requirements text is required unless --serve is given")
    run(args.requirements, LLMProvider(args.provider), output_path=args.output)


if __name__ == "__main__":
    main()
