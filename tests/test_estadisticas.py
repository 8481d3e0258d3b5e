"""
Tests de estadísticas de compra por punto de venta
"""
from datetime import datetime
import pytest
from pathlib import Path
import sys

# Agregar path del proyecto
sys.path.insert(0, str(Path(__file__).parent.parent))

from conftest import FakeFuente, item, orden, punto_venta
from reportes.estadisticas import EstadisticasPuntosVenta, calcular_frecuencia
from reportes.servicio import get_puntos_venta_stats


class TestCalcularFrecuencia:
    """Tests para calcular_frecuencia"""

    def test_sin_pedidos(self):
        assert calcular_frecuencia([]) == 'Sin pedidos'

    def test_un_pedido(self):
        assert calcular_frecuencia([datetime(2025, 10, 1)]) == '1 pedido (sin frecuencia)'

    def test_mismo_dia(self):
        fechas = [datetime(2025, 10, 1, 9), datetime(2025, 10, 1, 18)]
        assert calcular_frecuencia(fechas) == 'Pedidos el mismo día'

    def test_cada_un_dia(self):
        assert calcular_frecuencia([datetime(2025, 10, 1), datetime(2025, 10, 2)]) == 'Cada 1 día'

    def test_promedio_entre_extremos(self):
        """Test: (último - primero) / (n - 1) redondeado"""
        fechas = [datetime(2025, 10, 29), datetime(2025, 10, 1), datetime(2025, 10, 15)]
        assert calcular_frecuencia(fechas) == 'Cada 14 días'

    def test_redondeo_medio_hacia_arriba(self):
        """Test: 2.5 días → 3"""
        fechas = [datetime(2025, 10, 1), datetime(2025, 10, 3, 12), datetime(2025, 10, 6)]
        assert calcular_frecuencia(fechas) == 'Cada 3 días'


@pytest.fixture
def fuente(catalogo_docs):
    return FakeFuente(
        precios=catalogo_docs,
        puntos_venta=[
            punto_venta('pv1', 'ALFA', telefono='11-5555-0000'),
            punto_venta('pv2', 'BETA'),
            punto_venta('pv3', 'GAMMA', activo=False),
            punto_venta('pv4', 'DELTA'),
        ],
        ordenes=[
            orden('o1', 'pv1', created_at=datetime(2025, 10, 1, 10), items=[
                item('BOX PERRO POLLO', ('5KG', 2)),
                item('HIGADO', ('100GRS', 3)),
            ]),
            orden('o2', 'pv1', created_at=datetime(2025, 10, 15, 10), items=[
                item('BOX PERRO POLLO', ('5KG', 2)),
            ]),
            orden('o3', 'pv1', created_at=datetime(2025, 10, 29, 10), items=[
                item('BIG DOG', ('VACA', 1)),
            ]),
            orden('o4', 'pv2', created_at=datetime(2025, 10, 20, 10), items=[
                item('BOX GATO POLLO', ('5KG', 1)),
            ]),
            orden('o5', 'pv3', created_at=datetime(2025, 10, 20, 10), items=[
                item('BOX PERRO VACA', ('10KG', 10)),
            ]),
        ]
    )


class TestEstadisticasPuntosVenta:
    """Tests del motor de estadísticas"""

    def test_solo_activos_ordenados_por_kilos(self, fuente, catalogo):
        stats, _ = EstadisticasPuntosVenta(fuente, catalogo).generar()

        assert [s['nombre'] for s in stats] == ['ALFA', 'BETA', 'DELTA']

    def test_metricas(self, fuente, catalogo):
        """Test: RAW no suma kilos; el último pedido es el más reciente"""
        stats, _ = EstadisticasPuntosVenta(fuente, catalogo).generar()
        alfa = stats[0]

        assert alfa['kgTotales'] == 35
        assert alfa['totalPedidos'] == 3
        assert alfa['promedioKgPorPedido'] == 12
        assert alfa['kgUltimaCompra'] == 15
        assert alfa['frecuenciaCompra'] == 'Cada 14 días'
        assert alfa['fechaPrimerPedido'] == datetime(2025, 10, 1, 10)
        assert alfa['fechaUltimoPedido'] == datetime(2025, 10, 29, 10)
        assert alfa['telefono'] == '11-5555-0000'

    def test_sin_pedidos(self, fuente, catalogo):
        stats, _ = EstadisticasPuntosVenta(fuente, catalogo).generar()
        delta = stats[-1]

        assert delta['kgTotales'] == 0
        assert delta['totalPedidos'] == 0
        assert delta['frecuenciaCompra'] == 'Sin pedidos'
        assert delta['telefono'] == 'Sin teléfono'
        assert 'fechaUltimoPedido' not in delta

    def test_empate_por_nombre(self, catalogo):
        fuente = FakeFuente(puntos_venta=[punto_venta('b', 'ZETA'), punto_venta('a', 'ETA')])
        stats, _ = EstadisticasPuntosVenta(fuente, catalogo).generar()

        assert [s['nombre'] for s in stats] == ['ETA', 'ZETA']

    def test_ventana_por_created_at(self, fuente, catalogo):
        stats, _ = EstadisticasPuntosVenta(fuente, catalogo).generar(
            datetime(2025, 10, 10), datetime(2025, 10, 20, 23, 59)
        )
        alfa = next(s for s in stats if s['nombre'] == 'ALFA')

        assert alfa['totalPedidos'] == 1
        assert alfa['frecuenciaCompra'] == '1 pedido (sin frecuencia)'

    def test_paralelo_igual_a_secuencial(self, fuente, catalogo):
        secuencial, _ = EstadisticasPuntosVenta(fuente, catalogo).generar()
        paralelo, _ = EstadisticasPuntosVenta(fuente, catalogo, max_workers=3).generar()

        assert paralelo == secuencial


class TestGetPuntosVentaStats:
    """Tests del envelope de estadísticas"""

    def test_envelope_ok(self, fuente):
        result = get_puntos_venta_stats(fuente, from_date='2025-10-01', to_date='2025-10-31')

        assert result['success'] is True
        assert result['stats'][0]['kgTotales'] == 35
        assert result['diagnosticos']['catalogo']['month'] == 10

    def test_fecha_invalida(self, fuente):
        result = get_puntos_venta_stats(fuente, from_date='no-es-fecha')

        assert result['success'] is False
        assert 'Fecha inválida' in result['error']
