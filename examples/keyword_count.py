# Simple parallel keyword count: count a few animal names in one file.
#
# The file is read line by line by one LineSource and handed to 4 worker
# processes; each line's counts are merged into one shared KeywordTally.
#
# Call this script with the file to scan:
#
#   python keyword_count.py story.txt

from sys import argv, stdout
from kwcount import run_context, make_channel, KeywordTally, LineSource, WorkerPool, Result, write_report

KEYWORDS = ["cat", "dog", "bird"]

if __name__ == "__main__":
    with open(argv[1], encoding="utf-8") as text, run_context() as context:
        channel = make_channel()
        tally = KeywordTally(KEYWORDS)
        source = LineSource(text, channel, context, consumers=4)
        pool = WorkerPool(context, channel, tally, KEYWORDS, processes=4)
        source.start()
        pool.start()
        pool.join()
        source.join()
        counts, total = tally.snapshot()
    write_report(Result(KEYWORDS, counts, total), stdout)
