class Style:
    regular = 'default'
    context = 'grey50'
    info = 'bold blue'
    good = 'green'
    bad = 'red'
    suspicious = 'yellow'
    warning = 'bold yellow'
    mark = 'bold magenta'
    mark_neutral = 'bold cyan'
