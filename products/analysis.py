from blockchain.stages import terminal_state

AUTHENTIC = 'Authentic'
SUSPICIOUS = 'Suspicious'


def classify(product, stages=None):
    """
    Estado de confiança baseado apenas no estágio do ciclo de vida (product.state).
    Não consulta a verificação da hash chain: os dois sinais são reportados lado a lado.
    """
    if product.state != terminal_state(stages):
        return {
            'status': SUSPICIOUS,
            'message': "Product has not reached retail stage",
            'color': 'orange',
        }
    return {
        'status': AUTHENTIC,
        'message': "Product is safe and verified",
        'color': 'green',
    }
