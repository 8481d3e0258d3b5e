"""
Tests de la matriz productos x puntos de venta
"""
from datetime import datetime
import pytest
from pathlib import Path
import sys

# Agregar path del proyecto
sys.path.insert(0, str(Path(__file__).parent.parent))

from conftest import FakeFuente, item, orden, punto_venta
from core.diagnostics import Diagnosticos
from core.models import PuntoVenta
from processors.ordenes_processor import OrdenesProcessor
from reportes.matriz import MatrizProductos
from reportes.servicio import get_productos_matrix


@pytest.fixture
def fuente(catalogo_docs):
    """Tres puntos de venta; sólo PV1 y PV2 tienen órdenes de octubre"""
    return FakeFuente(
        precios=catalogo_docs,
        puntos_venta=[
            punto_venta('pv1', 'ALFA'),
            punto_venta('pv2', 'BETA', zona='SUR'),
            punto_venta('pv3', 'GAMMA', activo=False),
        ],
        ordenes=[
            orden('o1', 'pv1', items=[
                item('BOX PERRO POLLO', ('5KG', 2)),
                item('BIG DOG', ('POLLO', 1)),
            ]),
            orden('o2', 'pv1', items=[item('HIGADO', ('100GRS', 3))]),
            orden('o3', 'pv2', items=[
                item('BOX GATO VACA', ('5KG', 1)),
                item('PRODUCTO DESCONOCIDO', ('1KG', 1)),
            ]),
            # Fuera de la ventana (noviembre)
            orden('o4', 'pv2', items=[item('BOX PERRO VACA', ('10KG', 5))],
                  delivery_day=datetime(2025, 11, 2)),
            # Minorista: no entra
            orden('o5', 'pv2', items=[item('BOX PERRO CERDO', ('10KG', 1))], order_type='minorista'),
        ]
    )


class TestMatrizProductos:
    """Tests del motor de agregación"""

    def test_escenario_box_y_big_dog(self, fuente, catalogo):
        """Test: BOX PERRO POLLO 5KG x2 + BIG DOG POLLO x1 → 10 / 15 / total 25"""
        filas, _ = MatrizProductos(fuente, catalogo).generar(datetime(2025, 10, 1), datetime(2025, 10, 31, 23, 59))
        alfa = filas[0]

        assert alfa.nombre == 'ALFA'
        assert alfa.productos['PERRO POLLO'] == 10
        assert alfa.productos['BIG DOG POLLO'] == 15
        assert alfa.total_kilos == 25

    def test_raw_no_suma_al_total(self, fuente, catalogo):
        """Test: RAW se acumula en su columna pero no en totalKilos"""
        filas, _ = MatrizProductos(fuente, catalogo).generar(datetime(2025, 10, 1), datetime(2025, 10, 31, 23, 59))

        assert filas[0].productos['RAW - HIGADO 100GRS'] == 3
        assert filas[0].total_kilos == 25

    def test_todas_las_columnas_arrancan_en_cero(self, fuente, catalogo):
        filas, _ = MatrizProductos(fuente, catalogo).generar(datetime(2025, 10, 1), datetime(2025, 10, 31, 23, 59))
        gamma = filas[2]

        assert list(gamma.productos) == catalogo.product_names()
        assert all(valor == 0 for valor in gamma.productos.values())
        assert gamma.total_kilos == 0

    def test_ventana_y_tipo_de_orden(self, fuente, catalogo):
        """Test: Órdenes fuera de la ventana y minoristas no suman"""
        filas, _ = MatrizProductos(fuente, catalogo).generar(datetime(2025, 10, 1), datetime(2025, 10, 31, 23, 59))
        beta = filas[1]

        assert beta.productos['GATO VACA'] == 5
        assert beta.productos['PERRO VACA'] == 0
        assert beta.productos['PERRO CERDO'] == 0
        assert beta.total_kilos == 5

    def test_sin_match_va_a_diagnosticos(self, fuente, catalogo):
        _, diagnosticos = MatrizProductos(fuente, catalogo).generar(
            datetime(2025, 10, 1), datetime(2025, 10, 31, 23, 59)
        )

        assert len(diagnosticos.sin_match) == 1
        registro = diagnosticos.sin_match[0]
        assert registro['puntoVentaId'] == 'pv2'
        assert registro['orderId'] == 'o3'
        assert registro['item'] == 'PRODUCTO DESCONOCIDO'
        assert diagnosticos.catalogo == catalogo.resumen()

    def test_todo_producto_del_catalogo_tiene_columna(self, catalogo):
        """Test: Cualquier producto que devuelva el matcher tiene columna en la matriz"""
        columnas = set(MatrizProductos(FakeFuente(), catalogo).product_names)
        assert {p.canonical_name for p in catalogo.productos} <= columnas

    def test_diagnosticos_sin_match_y_malformadas(self, fuente, catalogo):
        _, diagnosticos = MatrizProductos(fuente, catalogo).generar(
            datetime(2025, 10, 1), datetime(2025, 10, 31, 23, 59)
        )
        assert set(diagnosticos.to_dict()) == {'catalogo', 'sinMatch', 'ordenesMalformadas'}
        assert diagnosticos.total == 1

    def test_acumular_ignora_minoristas(self, catalogo):
        """Test: El fold descarta órdenes no mayoristas aunque se las pasen"""
        motor = MatrizProductos(FakeFuente(), catalogo)
        ordenes = OrdenesProcessor().process([
            orden('m1', 'pv1', items=[item('BOX PERRO VACA', ('10KG', 1))], order_type='minorista')
        ])
        pv = PuntoVenta(id='pv1', nombre='ALFA', zona='NORTE', telefono='-')

        fila = motor.acumular(pv, ordenes, Diagnosticos())
        assert fila.total_kilos == 0

    def test_idempotente(self, fuente, catalogo):
        """Test: Dos corridas sobre los mismos datos dan el mismo resultado"""
        motor = MatrizProductos(fuente, catalogo)
        desde, hasta = datetime(2025, 10, 1), datetime(2025, 10, 31, 23, 59)

        primera, _ = motor.generar(desde, hasta)
        segunda, _ = motor.generar(desde, hasta)
        assert [f.to_dict() for f in primera] == [f.to_dict() for f in segunda]

    def test_paralelo_igual_a_secuencial(self, fuente, catalogo):
        """Test: Con varios workers el resultado y el orden no cambian"""
        desde, hasta = datetime(2025, 10, 1), datetime(2025, 10, 31, 23, 59)

        secuencial, diag_seq = MatrizProductos(fuente, catalogo).generar(desde, hasta)
        paralelo, diag_par = MatrizProductos(fuente, catalogo, max_workers=4).generar(desde, hasta)

        assert [f.to_dict() for f in paralelo] == [f.to_dict() for f in secuencial]
        assert diag_par.to_dict() == diag_seq.to_dict()


class TestGetProductosMatrix:
    """Tests del envelope de la matriz"""

    def test_envelope_ok(self, fuente):
        result = get_productos_matrix(fuente, 2025, 10)

        assert result['success'] is True
        assert result['productNames'][:2] == ['BIG DOG POLLO', 'BIG DOG VACA']
        assert [fila['puntoVentaNombre'] for fila in result['matrix']] == ['ALFA', 'BETA', 'GAMMA']
        assert result['matrix'][0]['totalKilos'] == 25
        assert result['diagnosticos']['catalogo']['nivel'] == 'exacto'

    def test_fechas_explicitas(self, fuente):
        """Test: Con from/to se usan esos días completos en lugar del mes"""
        result = get_productos_matrix(fuente, 2025, 10, from_date='2025-11-01', to_date='2025-11-30')

        beta = result['matrix'][1]
        assert beta['productos']['PERRO VACA'] == 50
        assert beta['productos']['GATO VACA'] == 0

    def test_sin_precios(self):
        """Test: Sin catálogo en ningún nivel → success False"""
        result = get_productos_matrix(FakeFuente(puntos_venta=[punto_venta('pv1', 'ALFA')]), 2025, 10)

        assert result['success'] is False
        assert 'precios mayoristas' in result['error']

    def test_mes_invalido(self, fuente):
        result = get_productos_matrix(fuente, 2025, 13)

        assert result['success'] is False
        assert 'Mes inválido' in result['error']
