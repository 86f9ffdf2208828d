PARAGRAPHS = [
    'Photosynthesis converts light energy into chemical energy stored in glucose because plants need fuel.',
    'Chlorophyll absorbs mostly blue and red light, which explains how leaves appear green to us.',
    'The Calvin cycle runs in the stroma and fixes carbon dioxide into sugars during the day.',
]


def three_paragraph_note():
    return '\n\n'.join(PARAGRAPHS)


def five_paragraph_note():
    extra = [
        'Stomata are small pores on the leaf surface that control gas exchange and water loss.',
        'Cellular respiration later releases the stored energy so the plant can grow at night.',
    ]
    return '\n\n'.join(PARAGRAPHS + extra)


def sentences_note():
    return 'Mitochondria produce ATP for the cell. Ribosomes build proteins from amino acids! Is the nucleus the control center? Yes it is. Short.'


def text_of_length(n):
    base = 'Notes about cells and energy flow in living systems. '
    return (base * (n // len(base) + 1))[:n]
