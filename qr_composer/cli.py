"""CLI entry point for QR Composer."""

import argparse
import os
import sys

from qr_composer import DEFAULT_OUTPUT, __version__


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qr-composer",
        description="Generate a QR code with an optional center logo and subtitle caption.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Plain QR code
  python -m qr_composer "https://example.com"

  # With a logo and a caption, saved as JPEG
  python -m qr_composer "https://example.com" \\
    --logo logo.png --subtitle "Scan me" -o menu.jpg

  # Use segno instead of python-qrcode and open a preview window
  python -m qr_composer "HELLO" --encoder segno --preview
        """,
    )

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    # Required
    parser.add_argument(
        "text",
        help="Text or URL to encode in the QR code",
    )

    # Optional — composition
    parser.add_argument(
        "--subtitle", "-s",
        default=None,
        help="Caption drawn centered below the QR code",
    )
    parser.add_argument(
        "--logo", "-l",
        default=None,
        help="Image (PNG, JPEG, BMP, GIF) to overlay at the center of the QR code",
    )
    parser.add_argument(
        "--font",
        default=None,
        help="TrueType font for the subtitle (default: $QR_COMPOSER_FONT or a bold system font)",
    )

    # Optional — output
    parser.add_argument(
        "--output", "-o",
        default=DEFAULT_OUTPUT,
        help=f"Output image path; format follows the extension (.png, .jpg, .bmp). "
             f"Default: {DEFAULT_OUTPUT}",
    )
    parser.add_argument(
        "--encoder",
        default="qrcode",
        choices=["qrcode", "segno"],
        help="QR encoding library. Default: qrcode",
    )

    # Flags
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Open the result in the system image viewer after saving",
    )
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Overwrite output file without prompting",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    # Lazy imports for faster --help
    from qr_composer.errors import EmptyPayloadError, NoImageError, QRComposerError
    from qr_composer.qr_generator import get_encoder
    from qr_composer.session import ComposerSession

    print(f"QR Composer v{__version__}")
    print("=" * 50)

    if not args.text.strip():
        print("\n  NOTICE: Enter some text to generate a QR code.", file=sys.stderr)
        return 1

    # ------------------------------------------------------------------
    # Check output overwrite
    # ------------------------------------------------------------------
    if os.path.exists(args.output) and not args.overwrite:
        response = input(f"  Output file '{args.output}' already exists. Overwrite? [y/N] ")
        if response.lower() not in ("y", "yes"):
            print("  Aborted.")
            return 0

    with ComposerSession(encoder=get_encoder(args.encoder), font_path=args.font) as session:
        try:
            # Step 1: Logo
            if args.logo:
                print(f"\n[1/3] Loading logo: {args.logo}")
                logo = session.import_logo(args.logo)
                print(f"  ✓ Logo loaded ({logo.width}x{logo.height})")
            else:
                print(f"\n[1/3] No logo")

            # Step 2: Encode and compose
            print(f"\n[2/3] Generating QR code for: {args.text}")
            print(f"  Encoder:         {session.encoder.name()}")
            if args.subtitle and args.subtitle.strip():
                print(f"  Subtitle:        {args.subtitle}")
            image = session.generate(args.text, args.subtitle)
            print(f"  ✓ QR code ready ({image.width}x{image.height})")

            # Step 3: Save and preview
            print(f"\n[3/3] Saving output to: {args.output}")
            output_path = session.save(args.output)
            print(f"  ✓ Saved: {output_path}")

            if args.preview:
                session.preview()

        except (EmptyPayloadError, NoImageError) as e:
            print(f"\n  NOTICE: {e}", file=sys.stderr)
            return 1
        except QRComposerError as e:
            print(f"\n  ERROR: {e}", file=sys.stderr)
            return 1

    print(f"\n✅ Done! Your QR code is at: {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
