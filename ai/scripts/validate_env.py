import os
import sys
import argparse
from pathlib import Path

from dotenv import load_dotenv

from smartnotes.providers import PROVIDERS

PROVIDER_CHOICES = tuple(PROVIDERS)


def validate(env=None):
    env = os.environ if env is None else env
    errors = []
    warnings = []

    default_provider = env.get('DEFAULT_PROVIDER', 'meaningcloud').strip().lower()
    if default_provider not in PROVIDER_CHOICES:
        errors.append(f"DEFAULT_PROVIDER must be one of {'|'.join(PROVIDER_CHOICES)}")

    for name, config in PROVIDERS.items():
        if not (env.get(config.credential_key) or '').strip():
            msg = f'{name}: Missing {config.credential_key}'
            if name == default_provider and env.get('PROVIDER_REQUIRED_FOR_READY', 'false').lower() in ('1', 'true', 'yes'):
                errors.append(msg)
            else:
                warnings.append(msg)

    openai_key = env.get('OPENAI_API_KEY', '')
    if openai_key and not openai_key.startswith('sk-'):
        warnings.append('OPENAI_API_KEY does not start with sk-; verify provider')

    hf_key = env.get('HUGGINGFACE_API_KEY', '')
    if hf_key and not hf_key.startswith('hf_'):
        warnings.append('HUGGINGFACE_API_KEY does not start with hf_; verify token')

    try:
        port = int(env.get('PORT', '8000'))
        if port < 1 or port > 65535:
            errors.append('PORT must be integer between 1 and 65535')
    except ValueError:
        errors.append('PORT must be an integer')

    try:
        rate = float(env.get('SIMULATED_FAILURE_RATE', '0.1'))
        if rate < 0.0 or rate > 1.0:
            errors.append('SIMULATED_FAILURE_RATE must be between 0.0 and 1.0')
    except ValueError:
        errors.append('SIMULATED_FAILURE_RATE must be a float')

    try:
        low = float(env.get('SIMULATED_MIN_LATENCY_S', '1.5'))
        high = float(env.get('SIMULATED_MAX_LATENCY_S', '2.5'))
        if low < 0 or high < low:
            errors.append('SIMULATED_MIN_LATENCY_S/SIMULATED_MAX_LATENCY_S must satisfy 0 <= min <= max')
    except ValueError:
        errors.append('SIMULATED_MIN_LATENCY_S and SIMULATED_MAX_LATENCY_S must be floats')

    for key, default in (('HTTP_TIMEOUT', '30'), ('HTTP_RETRY_ATTEMPTS', '3'), ('HTTP_RETRY_MAX_WAIT', '10')):
        try:
            if int(env.get(key, default)) < 1:
                errors.append(f'{key} must be a positive integer')
        except ValueError:
            errors.append(f'{key} must be an integer')

    return errors, warnings


def main(argv=None):
    parser = argparse.ArgumentParser()
    parser.add_argument('--strict', '-s', action='store_true', help='Convert warnings to failures')
    parser.add_argument('--env-file', default=str(Path(__file__).parent.parent / '.env'), help='dotenv file to load before validating')
    args = parser.parse_args(argv)

    load_dotenv(args.env_file)
    errors, warnings = validate()

    if errors:
        print('\nENV validation failed:')
        for e in errors:
            print(' -', e)
        return 1

    if warnings:
        print('\nWarnings:')
        for w in warnings:
            print(' -', w)
        if args.strict:
            print('\nStrict mode enabled: treating warnings as errors')
            return 1

    print('\nAll critical validations passed')
    return 0


if __name__ == '__main__':
    sys.exit(main())
