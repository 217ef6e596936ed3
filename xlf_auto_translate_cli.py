import argparse
import getpass
import logging
import os
import sys
import time
import traceback

from core.assembler import translate_file
from core.logger import get_logger, set_console_level, setup_exception_hook
from core.options import TranslateOptions
from core.settings_manager import SettingsManager
from core.xliff_inline_tags import ICU_SELECT_MARKERS, PLURAL_MARKERS
from providers.factory import KEYED_PROVIDERS, PROVIDERS, build_translator

logger = get_logger(__name__)

REQUIRED_FOR_TRANSLATION = (
    ("input", "-i/--in"),
    ("output", "-o/--out"),
    ("source_lang", "-f/--from"),
    ("target_lang", "-t/--to"),
)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xlf-auto-translate",
        description="Translates all missing or new entries in an .xlf file from one language to another.",
        epilog="example: xlf-auto-translate -i messages.xlf -o messages.fr.xlf -f en -t fr",
    )
    parser.add_argument("-i", "--in", dest="input", help="The input .xlf file to translate")
    parser.add_argument("-o", "--out", dest="output", help="The name of the translated output file")
    parser.add_argument("-f", "--from", dest="source_lang", help="The language code of the input file")
    parser.add_argument("-t", "--to", dest="target_lang", help="The language code to translate to")
    parser.add_argument("-r", "--rate", type=int, default=500,
                        help="Minimum time in ms between launching two translation calls (default: 500)")
    parser.add_argument("-c", "--concurrent", type=int, default=4,
                        help="How many translation calls may run at the same time (default: 4)")
    parser.add_argument("-p", "--proxy", help="Proxy URL for translation requests")
    parser.add_argument("--ap", "--auto-proxy", "--autoProxy", dest="auto_proxy", action="store_true",
                        help="Route translation requests through the local proxy on 127.0.0.1:9000")
    parser.add_argument("-s", "--skip", action="store_true",
                        help="Skip translating and add only target tags with boilerplate text inside")
    parser.add_argument("--cs", "--clear-state", "--clearState", dest="clear_state", action="store_true",
                        help="Update the state attribute once translated")
    parser.add_argument("--add-approved", "--add-approved-to-state-final", "--addApprovedToStateFinal",
                        dest="add_approved", action="store_true",
                        help='Add approved="yes" to trans-units whose target has state="final"')
    parser.add_argument("--keep-select", action="store_true",
                        help="Leave units with ICU select expressions for a human, like plurals")
    parser.add_argument("--provider", choices=PROVIDERS,
                        help="Translation backend (default: from the config file, google otherwise)")

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Also print debug output")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only print warnings and the summary")

    settings = parser.add_argument_group("settings", "Store defaults instead of translating")
    settings.add_argument("--set-api-key", metavar="PROVIDER", choices=KEYED_PROVIDERS,
                          help="Prompt for an API key and store it in the system keyring")
    settings.add_argument("--set-default-provider", metavar="PROVIDER", choices=PROVIDERS,
                          help="Backend used when --provider is not given")
    return parser


def update_settings(args) -> int:
    settings = SettingsManager()
    if args.set_api_key:
        key = getpass.getpass(f"API key for {args.set_api_key}: ").strip()
        if not key:
            print("X No API key entered, nothing stored.")
            return 1
        settings.set_api_key(args.set_api_key, key)
        print(f"✓ Stored the API key for {args.set_api_key}.")
    if args.set_default_provider:
        settings.set_active_provider(args.set_default_provider)
        print(f"✓ Default provider is now {args.set_default_provider} ({settings.config_path}).")
    return 0


def main(argv=None) -> int:
    setup_exception_hook()
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        set_console_level(logging.DEBUG)
    elif args.quiet:
        set_console_level(logging.WARNING)

    if args.set_api_key or args.set_default_provider:
        return update_settings(args)

    missing = [flag for dest, flag in REQUIRED_FOR_TRANSLATION if not getattr(args, dest)]
    if missing:
        parser.error(f"the following arguments are required: {', '.join(missing)}")

    # Report how long the whole process took
    start_time = time.monotonic()
    input_path = os.path.abspath(args.input)
    output_path = os.path.abspath(args.output)

    try:
        options = TranslateOptions(
            source_lang=args.source_lang,
            target_lang=args.target_lang,
            min_interval_ms=args.rate,
            max_concurrent=args.concurrent,
            proxy=args.proxy,
            auto_proxy=args.auto_proxy,
            skip=args.skip,
            clear_state=args.clear_state,
            add_approved_to_state_final=args.add_approved,
            plural_markers=PLURAL_MARKERS + ICU_SELECT_MARKERS if args.keep_select else PLURAL_MARKERS,
        )
        translator = None
        if not options.skip:
            translator = build_translator(args.provider, SettingsManager())

        logger.info(f"Translating {input_path} ({options.source_lang} -> {options.target_lang})")
        outcome = translate_file(input_path, output_path, options, translator)
    except Exception as e:
        logger.error(f"Translation of {input_path} aborted: {e}", exc_info=True)
        print(f"X Something went wrong while translating {args.input}!")
        print(traceback.format_exc())
        return 1

    elapsed_ms = int((time.monotonic() - start_time) * 1000)
    print(f"✓ Finished translating {outcome.number_of_translated} messages for {args.input} in {elapsed_ms}ms.")
    if outcome.failed:
        print(f"! {outcome.failed} messages failed and were marked for review.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
