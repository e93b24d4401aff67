import sys
import csv
import signal
import logging
from argparse import ArgumentParser

from murbloom.bloom import BloomFilter, InvalidArgument
from murbloom.murmur3 import hash_string

logger = logging.getLogger(__name__)


def write_exit_msg():
    if sys.stdout.isatty():
        sys.stdout.write('Use q or Ctrl-D to exit.\n')
        sys.stdout.flush()


def signal_handler(sig, frame):
    write_exit_msg()


def make_filter(args):
    if args.sizing == 'explicit':
        return BloomFilter(args.bits, args.hashes, fast_hash=args.fast, encoding=args.encoding)
    elif args.sizing == 'capacity':
        return BloomFilter.for_capacity(args.insertions, args.fpp, fast_hash=args.fast, encoding=args.encoding)


def _write_line(out, text):
    out.write(text)
    out.write('\n')
    if out.isatty():
        out.flush()


def parse(fd, bf, out=None):
    out = out or sys.stdout
    csv_reader = csv.reader(fd, delimiter=' ', quotechar='"')
    for row in csv_reader:
        if not row:
            continue
        try:
            op = row[0]
            if op == 'p' or op == 'a':
                _write_line(out, str(bf.insert(row[1])).lower())
            elif op == 'c' or op == 'g':
                _write_line(out, str(bf.might_contain(row[1])).lower())
            elif op == 'h':
                _write_line(out, str(hash_string(row[1], bf.encoding)))
            elif op == 'i':
                _write_line(out, f'{bf.num_bits} {bf.num_hash_functions} {str(bf.fast_hash).lower()} {bf.bits_set}')
            elif op == 'q':
                return
            else:
                sys.stderr.write(f'unknown command {op!r}.\n')
        except IndexError:
            sys.stderr.write('malformed command.\n')


def main(argv=None):
    parser = ArgumentParser(prog='murbloom')
    subparsers = parser.add_subparsers(title='sizing', dest='sizing', help='how the filter is sized')
    parser.add_argument('-f', type=str, help='path to input file')
    parser.add_argument('-v', '--verbose', action='store_true', help='log debug messages to stderr')
    parser.add_argument('--fast', action='store_true', help='derive hashes from a single Murmur3 pass')
    parser.add_argument('--encoding', type=str, help='text encoding of the keys', default='utf-8')

    explicit_parser = subparsers.add_parser('explicit')
    explicit_parser.add_argument('--bits', type=int, help='length of the bit array', required=True)
    explicit_parser.add_argument('--hashes', type=int, help='number of hash functions', required=True)

    capacity_parser = subparsers.add_parser('capacity')
    capacity_parser.add_argument('--insertions', type=int, help='expected number of insertions', required=True)
    capacity_parser.add_argument('--fpp', type=float, help='desired false positive probability', default=0.03)

    args = parser.parse_args(argv)
    if not args.sizing:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(asctime)s %(name)s %(levelname)s %(message)s')

    try:
        bf = make_filter(args)
    except InvalidArgument as e:
        sys.stderr.write(f'{e}\n')
        sys.exit(2)
    logger.info('created %r', bf)

    signal.signal(signal.SIGINT, signal_handler)
    write_exit_msg()

    if args.f:
        with open(args.f, 'r', encoding='utf-8') as fd:
            parse(fd, bf)
    else:
        parse(sys.stdin, bf)


if __name__ == '__main__':
    main()
