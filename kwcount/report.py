TOTAL_LABEL = "всего"

def format_report(result):
    """Yield the report lines: one per keyword in file order, then the total.
    """
    for keyword in result.keywords:
        yield "{0}: {1}".format(keyword, result.counts[keyword])
    yield "{0}: {1}".format(TOTAL_LABEL, result.total)

def write_report(result, out):
    for line in format_report(result):
        out.write(line + "\n")
    out.flush()
